"""
Flag values and the "argument not provided" marker.

Integer values match the ones exposed by the OpenSSL bindings of other
runtimes so that stored option masks keep their meaning.
"""


class _Absent:
    """Marker for an optional argument the caller did not supply."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self):
        return (_Absent, ())


ABSENT = _Absent()


# Symmetric cipher options (bitmask)
OPENSSL_RAW_DATA = 1
OPENSSL_ZERO_PADDING = 2
OPENSSL_DONT_ZERO_PAD_KEY = 4

# Asymmetric padding
OPENSSL_PKCS1_PADDING = 1
OPENSSL_SSLV23_PADDING = 2
OPENSSL_NO_PADDING = 3
OPENSSL_PKCS1_OAEP_PADDING = 4

# Signature digests
OPENSSL_ALGO_SHA1 = 1
OPENSSL_ALGO_MD5 = 2
OPENSSL_ALGO_MD4 = 3
OPENSSL_ALGO_SHA224 = 6
OPENSSL_ALGO_SHA256 = 7
OPENSSL_ALGO_SHA384 = 8
OPENSSL_ALGO_SHA512 = 9
OPENSSL_ALGO_RMD160 = 10

# Key types for pkey_new
OPENSSL_KEYTYPE_RSA = 0
OPENSSL_KEYTYPE_DSA = 1
OPENSSL_KEYTYPE_DH = 2
OPENSSL_KEYTYPE_EC = 3

# PKCS#7 envelope ciphers
OPENSSL_CIPHER_RC2_40 = 0
OPENSSL_CIPHER_RC2_128 = 1
OPENSSL_CIPHER_RC2_64 = 2
OPENSSL_CIPHER_DES = 3
OPENSSL_CIPHER_3DES = 4
OPENSSL_CIPHER_AES_128_CBC = 5
OPENSSL_CIPHER_AES_192_CBC = 6
OPENSSL_CIPHER_AES_256_CBC = 7

# PKCS#7 flags (bitmask)
PKCS7_TEXT = 1
PKCS7_NOCERTS = 2
PKCS7_NOSIGS = 4
PKCS7_NOCHAIN = 8
PKCS7_NOINTERN = 16
PKCS7_NOVERIFY = 32
PKCS7_DETACHED = 64
PKCS7_BINARY = 128
PKCS7_NOATTR = 256
PKCS7_NOSMIMECAP = 512
