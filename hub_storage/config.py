import os

STORAGE_DRIVER = os.getenv("STORAGE_DRIVER", "github")
HUB_BUCKET = os.getenv("HUB_BUCKET", "hub")

# GitHub
GH_AUTHTYPE = os.getenv("GH_AUTHTYPE", "token")
GH_TOKEN = os.getenv("GH_TOKEN", "")
GH_BASEURL = os.getenv("GH_BASEURL", "https://api.github.com")
GH_OWNER = os.getenv("GH_OWNER", "")
GH_REPO = os.getenv("GH_REPO", "")
GH_PATH = os.getenv("GH_PATH", "")
GH_REF = os.getenv("GH_REF", "")

# AWS S3
AWS_REGION = os.getenv("AWS_REGION", "us-east-1")
AWS_ACCESS_KEY_ID = os.getenv("AWS_ACCESS_KEY_ID", "")
AWS_SECRET_ACCESS_KEY = os.getenv("AWS_SECRET_ACCESS_KEY", "")
S3_READ_URL = os.getenv("S3_READ_URL", "")

# MinIO
MINIO_ENDPOINT = os.getenv("MINIO_ENDPOINT", "localhost")
MINIO_PORT = os.getenv("MINIO_PORT", "9000")
MINIO_ACCESS_KEY = os.getenv("MINIO_ACCESS_KEY", "")
MINIO_SECRET_KEY = os.getenv("MINIO_SECRET_KEY", "")
MINIO_SECURE = os.getenv("MINIO_SECURE", "false").lower() == "true"
MINIO_READ_URL = os.getenv("MINIO_READ_URL", "")

# Local storage
LOCAL_STORAGE_PATH = os.getenv("LOCAL_STORAGE_PATH", "/tmp/hub-storage")
LOCAL_READ_URL = os.getenv("LOCAL_READ_URL", "http://localhost:3000/read/")


def _drop_empty(values: dict) -> dict:
    return {k: v for k, v in values.items() if v not in ("", None)}


def load_driver_config() -> dict:
    """Build the hub-style driver mapping from the environment.

    Empty settings are left out so each driver applies its own defaults.
    """
    return {
        "driver": STORAGE_DRIVER,
        "bucket": HUB_BUCKET,
        "ghConfig": _drop_empty({
            "authtype": GH_AUTHTYPE,
            "token": GH_TOKEN,
            "baseurl": GH_BASEURL,
            "owner": GH_OWNER,
            "repo": GH_REPO,
            "path": GH_PATH,
            "ref": GH_REF,
        }),
        "awsCredentials": _drop_empty({
            "region": AWS_REGION,
            "accessKeyId": AWS_ACCESS_KEY_ID,
            "secretAccessKey": AWS_SECRET_ACCESS_KEY,
        }),
        "minioConfig": _drop_empty({
            "endpoint": f"{MINIO_ENDPOINT}:{MINIO_PORT}" if MINIO_PORT else MINIO_ENDPOINT,
            "accessKey": MINIO_ACCESS_KEY,
            "secretKey": MINIO_SECRET_KEY,
            "secure": MINIO_SECURE,
        }),
        "diskSettings": _drop_empty({
            "storageRootDirectory": LOCAL_STORAGE_PATH,
        }),
        "readURL": _drop_empty({
            "s3": S3_READ_URL,
            "minio": MINIO_READ_URL,
            "disk": LOCAL_READ_URL,
        }),
    }
