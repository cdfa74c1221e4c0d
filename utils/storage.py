import logging
import os
import re
import time

import cloudinary
import cloudinary.uploader
from django.conf import settings
from rest_framework.exceptions import ValidationError

logger = logging.getLogger(__name__)


def _configure():
    cloudinary.config(
        cloud_name=settings.CLOUDINARY_STORAGE['CLOUD_NAME'],
        api_key=settings.CLOUDINARY_STORAGE['API_KEY'],
        api_secret=settings.CLOUDINARY_STORAGE['API_SECRET']
    )


def submission_file_key(user_id, event_id, filename, timestamp=None):
    """
    Build the storage key for a submission archive.

    Keys are namespaced by user and event, and stamped with the upload time
    in milliseconds so re-uploads never overwrite each other, e.g.
    ``submissions/12/7/1718000000000.zip``.
    """
    if timestamp is None:
        timestamp = int(time.time() * 1000)
    ext = os.path.splitext(filename or '')[1].lstrip('.').lower()
    key = f"{settings.SUBMISSION_UPLOAD_FOLDER}/{user_id}/{event_id}/{timestamp}"
    return f"{key}.{ext}" if ext else key


def upload_file(uploaded_file, key):
    """
    Upload a file to Cloudinary under an explicit key and return its public URL.

    Args:
        uploaded_file: The file from request.FILES
        key: Full storage key (folder path plus file name)

    Returns:
        str: The secure URL of the stored object

    Raises:
        ValidationError: If the upload fails
    """
    try:
        _configure()
        result = cloudinary.uploader.upload(
            uploaded_file,
            public_id=key,
            resource_type='raw',
            overwrite=False,
        )
        url = result.get('secure_url')
        logger.info(f"Uploaded {key} to storage")
        return url
    except Exception as e:
        logger.error(f"Failed to upload {key}: {str(e)}")
        raise ValidationError(f"Failed to upload file: {str(e)}")


def upload_image(image_file, folder=None):
    """Upload an image (event posters) and return its secure URL."""
    try:
        _configure()
        upload_options = {
            'resource_type': 'image',
            'quality': 'auto',
            'fetch_format': 'auto',
        }
        if folder:
            upload_options['folder'] = folder
        result = cloudinary.uploader.upload(image_file, **upload_options)
        return result.get('secure_url')
    except Exception as e:
        logger.error(f"Failed to upload image: {str(e)}")
        raise ValidationError(f"Failed to upload image: {str(e)}")


def delete_file(key, resource_type='raw'):
    """
    Delete a stored object by key.

    Returns:
        bool: True if the object was removed, False otherwise
    """
    try:
        _configure()
        result = cloudinary.uploader.destroy(key, resource_type=resource_type)
        return result.get('result') == 'ok'
    except Exception as e:
        logger.warning(f"Failed to delete {key} from storage: {str(e)}")
        return False


def key_from_url(url):
    """
    Recover the storage key from a delivery URL.

    ``https://res.cloudinary.com/demo/raw/upload/v1718/submissions/12/7/1718.zip``
    gives ``submissions/12/7/1718.zip``. Returns None for URLs we did not issue.
    """
    match = re.search(r'/upload/(?:v\d+/)?(.+)$', url or '')
    return match.group(1) if match else None
