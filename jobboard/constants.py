"""Application-wide constants and configuration values."""

# Collection names
JOBS_COLLECTION = "dot_jobs"
APPLICATIONS_COLLECTION = "job_applications"
CANDIDATE_PROFILES_COLLECTION = "candidates"
SUPPLIERS_COLLECTION = "suppliers"

# Job location sentinel for remote work
REMOTE_LOCATION = "Remoto"

# Dynamic fields are flattened onto application documents under this prefix
CUSTOM_FIELD_PREFIX = "customField_"

# Upload limits
MEGABYTE = 1024 * 1024
RESUME_MAX_BYTES = 5 * MEGABYTE
RESUME_CONTENT_TYPE = "application/pdf"
CUSTOM_FIELD_FILE_MAX_BYTES = 50 * MEGABYTE

# Upload path prefixes
RESUME_UPLOAD_PREFIX = "resumes"
CUSTOM_FIELD_UPLOAD_PREFIX = "custom-fields"

# Admin sessions are stored under "<prefix>:<token>"
ADMIN_SESSION_KEY_PREFIX = "adminSession"

# Fixed values written on supplier records created by "send for analysis"
SUPPLIER_DEFAULTS = {
    "tipo": "PF",
    "categoria": "Recursos Humanos",
    "centroDeCusto": "RH",
}
