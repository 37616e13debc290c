"""
Signature Verifier - claim signatures for BySignature trophies.

The signed message is the claimant's own address string:

    digest    = sha256(utf8(claimant))
    signature = secp256k1 ECDSA over digest, compact r||s (64 bytes), base64
    key       = SEC1 secp256k1 public key, base64

A claimant cannot present a signature made for someone else: the digest is
always rebuilt from the caller's own identity.
"""
import binascii
from base64 import b64decode
from hashlib import sha256

from trophy_host import Api


def claim_digest(claimant: bytes) -> bytes:
    """Digest a claimant signs: single-round sha256 of the address bytes."""
    return sha256(claimant).digest()


def decode_base64(text: bytes) -> bytes:
    """Strict base64 decode. Returns b"" for anything that is not valid base64."""
    try:
        return b64decode(text, validate=True)
    except (binascii.Error, ValueError):
        return b""


def verify(api: Api, public_key: bytes, message: bytes, signature: bytes) -> bool:
    """
    Check that `signature` (base64) over sha256(message) was made by
    `public_key` (base64).

    Malformed encodings, wrong lengths and invalid curve points all return
    False, exactly like a well-formed but wrong signature.
    """
    key_bytes = decode_base64(public_key)
    sig_bytes = decode_base64(signature)
    if not key_bytes or not sig_bytes:
        return False
    return api.secp256k1_verify(claim_digest(message), sig_bytes, key_bytes)
