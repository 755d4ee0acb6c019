#!/usr/bin/env python3
"""Generate VAPID keys for Web Push notifications."""

import base64
import sys

from cryptography.hazmat.primitives import serialization
from py_vapid import Vapid


def b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("utf-8").rstrip("=")


def main() -> int:
    vapid = Vapid()
    vapid.generate_keys()

    # Raw 32-byte private scalar, the format Vapid.from_string() accepts
    private_value = vapid.private_key.private_numbers().private_value
    private_key_b64 = b64url(private_value.to_bytes(32, "big"))

    # Public key in uncompressed point format for applicationServerKey
    public_key_bytes = vapid.public_key.public_bytes(
        encoding=serialization.Encoding.X962,
        format=serialization.PublicFormat.UncompressedPoint,
    )
    public_key_b64 = b64url(public_key_bytes)

    if "--pem" in sys.argv[1:]:
        vapid.save_key("vapid_private.pem")
        vapid.save_public_key("vapid_public.pem")

    print("=" * 70)
    print("VAPID KEYS GENERATED - Add to .env")
    print("=" * 70)
    print(f"VAPID_PUBLIC_KEY={public_key_b64}")
    print(f"VAPID_PRIVATE_KEY={private_key_b64}")
    print("VAPID_SUBJECT=mailto:admin@dayplain.local")
    print("=" * 70)
    if "--pem" in sys.argv[1:]:
        print("\nKeys also saved to vapid_private.pem and vapid_public.pem")
    return 0


if __name__ == "__main__":
    sys.exit(main())
