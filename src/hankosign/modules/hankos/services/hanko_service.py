import base64
import binascii
import logging
import re
import time
from typing import List
from botocore.exceptions import BotoCoreError, ClientError
from sqlalchemy.orm import Session

from hankosign.errors import NotFoundError, ValidationError
from hankosign.modules.documents.models.signature import Signature
from hankosign.modules.hankos.models.hanko import Hanko, HankoType
from hankosign.modules.hankos.schemas.hanko_schemas import HankoCreate
from hankosign.services.storage_client import StorageClient, generate_hanko_key

logger = logging.getLogger(__name__)

_DATA_URL_PREFIX = re.compile(r"^data:image/[\w.+-]+;base64,")

class HankoService:

    @staticmethod
    def decode_image(image_data: str) -> bytes:
        """Decode a canvas export (optionally a ``data:`` URL) to raw bytes"""
        encoded = _DATA_URL_PREFIX.sub("", image_data, count=1)
        try:
            decoded = base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError):
            raise ValidationError("Image data is not valid base64")
        if not decoded:
            raise ValidationError("Image data is required")
        return decoded

    @staticmethod
    def list_hankos(session: Session, user_id: int) -> List[Hanko]:
        return (
            session.query(Hanko)
            .filter(Hanko.user_id == user_id)
            .order_by(Hanko.created_at.desc(), Hanko.id.desc())
            .all()
        )

    @staticmethod
    def create_hanko(session: Session, storage: StorageClient, user_id: int, data: HankoCreate) -> Hanko:
        """
        Persist a designed hanko:
        - decode the image
        - upload it to object storage
        - create the record, keeping the encoded image for quick access
        """
        # 1) Decode before touching storage so bad input persists nothing
        image_bytes = HankoService.decode_image(data.image_data)

        # 2) Upload
        image_key = generate_hanko_key(user_id, f"hanko_{int(time.time() * 1000)}")
        image_url = storage.upload_file(image_key, image_bytes, "image/png")

        # 3) Record
        hanko = Hanko(
            user_id=user_id,
            name=data.name,
            type=data.type,
            image_url=image_url,
            image_key=image_key,
            image_data=data.image_data,
            font=data.font,
            size=data.size,
            is_registered=data.type == HankoType.JITSUIN and bool(data.registration_number),
            registration_number=data.registration_number,
        )
        session.add(hanko)
        session.commit()
        session.refresh(hanko)

        logger.info(f"User {user_id} created hanko {hanko.id} ({hanko.type.value})")
        return hanko

    @staticmethod
    def delete_hanko(session: Session, storage: StorageClient, user_id: int, hanko_id: int) -> None:
        """
        Delete an owned hanko; another user's hanko is reported as missing.

        The stored image is removed best-effort after the commit.
        """
        hanko = (
            session.query(Hanko)
            .filter(Hanko.id == hanko_id, Hanko.user_id == user_id)
            .first()
        )
        if not hanko:
            raise NotFoundError("Hanko not found")

        in_use = session.query(Signature.id).filter(Signature.hanko_id == hanko.id).first()
        if in_use:
            raise ValidationError("This hanko has been used for signatures and cannot be deleted")

        image_key = hanko.image_key
        session.delete(hanko)
        session.commit()
        logger.info(f"User {user_id} deleted hanko {hanko_id}")

        try:
            storage.delete_file(image_key)
        except (BotoCoreError, ClientError) as e:
            logger.warning(f"Could not delete stored hanko image {image_key}: {e}")
