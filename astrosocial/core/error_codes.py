# Machine-readable codes returned in the "error_code" field of error responses

# Authentication
INVALID_TOKEN = "INVALID_TOKEN"
INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
ACCOUNT_INACTIVE = "ACCOUNT_INACTIVE"

# Users
USER_NOT_FOUND = "USER_NOT_FOUND"
NOT_AUTHORIZED = "NOT_AUTHORIZED"
EMAIL_ALREADY_REGISTERED = "EMAIL_ALREADY_REGISTERED"
USERNAME_TAKEN = "USERNAME_TAKEN"
PASSWORD_MUST_NOT_BE_THE_SAME = "PASSWORD_MUST_NOT_BE_THE_SAME"
USER_DELETE_ERROR = "USER_DELETE_ERROR"
DATABASE_INTEGRITY_ERROR = "DATABASE_INTEGRITY_ERROR"

# Avatars
INVALID_FILE_TYPE = "INVALID_FILE_TYPE"
FILE_TOO_LARGE = "FILE_TOO_LARGE"
FILE_UPLOAD_ERROR = "FILE_UPLOAD_ERROR"

# Follow graph
CANNOT_FOLLOW_SELF = "CANNOT_FOLLOW_SELF"

# Throttling
RATE_LIMITED = "RATE_LIMITED"
