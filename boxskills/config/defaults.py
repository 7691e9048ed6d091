"""Default configuration values for boxskills."""

# Default configuration dictionary
DEFAULT_CONFIG = {
    # Box Platform App (JWT) Configuration
    "box": {
        "client_id": "",
        "client_secret": "",
        "key_id": "",
        "private_key": "",
        "passphrase": "",
    },
    
    # Google Cloud Vision service account
    "google": {
        "project_id": "",
        "client_email": "",
        "private_key": "",
        "token_uri": "https://oauth2.googleapis.com/token",
    },
    
    # Annotation Service Configuration
    "annotation": {
        "provider": "google-cloud-vision",
        "features": ["LABEL_DETECTION", "DOCUMENT_TEXT_DETECTION"],
        "timeout": 60,
        "max_image_bytes": 10 * 1024 * 1024,  # Vision inline content limit
        "jpeg_quality": 85,
    },
    
    # File Download Configuration
    "download": {
        "chunk_size": 64 * 1024,
        "max_file_size": 50 * 1024 * 1024,
    },
    
    # Metadata Templates (global scope)
    "metadata": {
        "keywords_template": "box-skills-keywords-demo",
        "transcripts_template": "box-skills-transcripts-demo",
        "keyword_separator": ", ",
    },
    
    # Processing Configuration
    "processing": {
        "dry_run": False,
        "max_workers": 2,
    },
    
    # Logging Configuration
    "logging": {
        "level": "INFO",
        "file": "",
        "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    },
}

# Required configuration fields (must be provided by the environment or file)
REQUIRED_FIELDS = [
    "box.client_id",
    "box.client_secret",
    "box.key_id",
    "box.private_key",
    "google.project_id",
    "google.client_email",
    "google.private_key",
]

# Environment variables and the configuration keys they populate
ENVIRONMENT_VARIABLES = {
    "GCV_PROJECT_ID": "google.project_id",
    "GCV_CLIENT_EMAIL": "google.client_email",
    "GCV_PRIVATE_KEY": "google.private_key",
    "BOX_CLIENT_ID": "box.client_id",
    "BOX_CLIENT_SECRET": "box.client_secret",
    "BOX_KEY_ID": "box.key_id",
    "BOX_PRIVATE_KEY": "box.private_key",
    "BOX_PASSPHRASE": "box.passphrase",
    "BOX_SKILLS_MAX_FILE_SIZE": "download.max_file_size",
    "BOX_SKILLS_DRY_RUN": "processing.dry_run",
    "BOX_SKILLS_LOG_LEVEL": "logging.level",
}

# Environment variable naming an optional YAML configuration file
CONFIG_PATH_VARIABLE = "BOX_SKILLS_CONFIG"

# Fields stored with escaped newline sequences (e.g. PEM keys in env vars)
ESCAPED_FIELDS = [
    "box.private_key",
    "google.private_key",
]

# Configuration field descriptions used in validation errors
FIELD_DESCRIPTIONS = {
    "box.client_id": "Box application Client ID (BOX_CLIENT_ID)",
    "box.client_secret": "Box application Client Secret (BOX_CLIENT_SECRET)",
    "box.key_id": "Box app auth public key ID (BOX_KEY_ID)",
    "box.private_key": "Box app auth private key, newlines escaped (BOX_PRIVATE_KEY)",
    "box.passphrase": "Box app auth private key passphrase, empty for an unencrypted key (BOX_PASSPHRASE)",
    "google.project_id": "Google Cloud project ID (GCV_PROJECT_ID)",
    "google.client_email": "Google service account email (GCV_CLIENT_EMAIL)",
    "google.private_key": "Google service account private key, newlines escaped (GCV_PRIVATE_KEY)",
}
