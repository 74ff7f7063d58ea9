from s3direct.services.post_policy import DEFAULT_EXPIRY_MINUTES, PostPolicy, build_post_policy
from s3direct.services.progress import ProgressReader
from s3direct.services.s3_upload import (
    PresignedPost,
    build_endpoint,
    build_form_fields,
    build_object_url,
    convert_metadata_to_params,
    presign_post,
    resolve_object_key,
    to_kebab_case,
    upload,
    upload_from_bytes,
    upload_from_file,
    upload_uint8list,
)
from s3direct.services.sigv4 import calculate_signature, credential_scope, derive_signing_key, sign_policy

__all__ = [
    "DEFAULT_EXPIRY_MINUTES",
    "PostPolicy",
    "build_post_policy",
    "ProgressReader",
    "PresignedPost",
    "build_endpoint",
    "build_form_fields",
    "build_object_url",
    "convert_metadata_to_params",
    "presign_post",
    "resolve_object_key",
    "to_kebab_case",
    "upload",
    "upload_from_bytes",
    "upload_from_file",
    "upload_uint8list",
    "calculate_signature",
    "credential_scope",
    "derive_signing_key",
    "sign_policy",
]
