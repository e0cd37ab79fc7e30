#!/usr/bin/env python3
"""
Generate a Private Key and Certificate Signing Request

This script creates an RSA key pair and a CSR for it through the safessl
API, ready to be submitted to a certificate authority.

Usage:
    python scripts/gen_csr.py --cn server.local --out certs/server
    python scripts/gen_csr.py --cn client.local --out certs/client --passphrase secret
"""

import argparse
import logging
import os
import sys

import safessl
from safessl import CryptoOperationError, get_settings

logger = logging.getLogger("gen_csr")


def generate_csr(
    common_name: str,
    bits: int,
    country: str = "PK",
    organization: str = None,
):
    """
    Generate a key and a CSR signed with it.

    Args:
        common_name: Common Name (CN) for the request (e.g., server.local)
        bits: RSA key size
        country: Two-letter country code
        organization: Organization name, omitted when empty

    Returns:
        Tuple of (key handle, CSR handle)
    """
    print(f"[*] Generating {bits}-bit RSA private key for '{common_name}'...")
    key = safessl.pkey_new({
        "private_key_type": safessl.OPENSSL_KEYTYPE_RSA,
        "private_key_bits": bits,
    })

    dn = {"C": country, "CN": common_name}
    if organization:
        dn["O"] = organization

    print(f"[*] Creating certificate signing request for '{common_name}'...")
    csr = safessl.csr_new(dn, key)

    subject = safessl.csr_get_subject(csr)
    print("[+] CSR created successfully!")
    for name, value in subject.items():
        print(f"    {name}: {value}")

    return key, csr


def save_key_and_csr(key, csr, output_prefix: str, passphrase: str = None):
    """Save private key and CSR to <prefix>_key.pem and <prefix>_csr.pem."""

    # Ensure output directory exists
    output_dir = os.path.dirname(output_prefix)
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)

    key_path = f"{output_prefix}_key.pem"
    if passphrase:
        safessl.pkey_export_to_file(key, key_path, passphrase)
    else:
        safessl.pkey_export_to_file(key, key_path)
    print(f"[+] Private key saved to: {key_path}")

    csr_path = f"{output_prefix}_csr.pem"
    safessl.csr_export_to_file(csr, csr_path)
    print(f"[+] CSR saved to: {csr_path}")

    return key_path, csr_path


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Generate a private key and certificate signing request"
    )
    parser.add_argument(
        "--cn",
        required=True,
        help="Common Name (CN) for the request (e.g., server.local)"
    )
    parser.add_argument(
        "--out",
        required=True,
        help="Output prefix for key and CSR files (e.g., certs/server)"
    )
    parser.add_argument(
        "--bits",
        type=int,
        default=None,
        help="RSA key size (default: SAFESSL_DEFAULT_KEY_BITS or 2048)"
    )
    parser.add_argument(
        "--passphrase",
        default=None,
        help="Encrypt the private key with this passphrase"
    )
    parser.add_argument(
        "--org",
        default=None,
        help="Organization name"
    )
    parser.add_argument(
        "--country",
        default="PK",
        help="Two-letter country code (default: PK)"
    )

    args = parser.parse_args(argv)

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    bits = args.bits or settings.default_key_bits

    try:
        key, csr = generate_csr(
            common_name=args.cn,
            bits=bits,
            country=args.country,
            organization=args.org,
        )
        save_key_and_csr(key, csr, args.out, args.passphrase)
    except CryptoOperationError as e:
        logger.error("%s failed", e.operation)
        print(f"[!] {e}")
        for line in e.diagnostics:
            print(f"    {line}")
        sys.exit(1)

    print("\n[+] Key and CSR generated successfully!")


if __name__ == "__main__":
    main()
