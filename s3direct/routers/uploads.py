import logging

from fastapi import APIRouter, HTTPException, status

from s3direct.config import (
    get_s3_access_key_id,
    get_s3_bucket,
    get_s3_default_acl,
    get_s3_region,
    get_s3_secret_access_key,
    get_s3_session_token,
    get_s3_use_ssl,
)
from s3direct.errors import UploadValidationError
from s3direct.schemas.uploads import PresignPostRequest, PresignPostResponse
from s3direct.services.s3_upload import presign_post
from s3direct.types import Credentials, Destination, UploadOptions

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/uploads", tags=["uploads"])


@router.post("/presign-post", response_model=PresignPostResponse)
def presign_s3_post(payload: PresignPostRequest) -> PresignPostResponse:
    try:
        credentials = Credentials(
            access_key=get_s3_access_key_id() or "",
            secret_key=get_s3_secret_access_key() or "",
            session_token=get_s3_session_token(),
        )
        destination = Destination(
            bucket=get_s3_bucket() or "",
            region=get_s3_region(),
            filename=payload.filename,
            dest_dir=payload.dest_dir,
            key=payload.key,
        )
        presigned = presign_post(
            credentials,
            destination,
            content_length=payload.content_length,
            options=UploadOptions(
                acl=payload.acl or get_s3_default_acl(),
                content_type=payload.content_type,
                use_ssl=get_s3_use_ssl(),
                metadata=payload.metadata,
            ),
        )
    except UploadValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=exc.message,
        ) from exc
    except Exception as exc:
        logger.error(f"Failed to presign S3 POST for {payload.filename}: {exc}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Failed to generate S3 POST policy: {exc}",
        ) from exc

    return PresignPostResponse(
        url=presigned.url,
        fields=presigned.fields,
        object_url=presigned.object_url,
        expires_at=presigned.expires_at,
    )
