from app.services.datasource import Datasource, new_datasource, parse_instance_settings, split_image_keys
from app.services.instance_manager import InstanceManager
from app.services.s3_storage import create_s3_client, generate_presigned_get_url

__all__ = [
    "Datasource",
    "new_datasource",
    "parse_instance_settings",
    "split_image_keys",
    "InstanceManager",
    "create_s3_client",
    "generate_presigned_get_url",
]
