"""
X.509 certificates and certificate signing requests.
"""

from cryptography import x509
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ed448, ed25519
from cryptography.x509.oid import AttributeOID, NameOID

from safessl.common.config import get_settings
from safessl.common.utils import write_file
from .cipher import lookup_digest
from .errors import reports_errors
from .handles import CsrHandle, load_certificate, load_csr, load_private_key

# (short name, long name, oid)
NAME_ATTRIBUTES = [
    ("C", "countryName", NameOID.COUNTRY_NAME),
    ("ST", "stateOrProvinceName", NameOID.STATE_OR_PROVINCE_NAME),
    ("L", "localityName", NameOID.LOCALITY_NAME),
    ("street", "streetAddress", NameOID.STREET_ADDRESS),
    ("O", "organizationName", NameOID.ORGANIZATION_NAME),
    ("OU", "organizationalUnitName", NameOID.ORGANIZATIONAL_UNIT_NAME),
    ("CN", "commonName", NameOID.COMMON_NAME),
    ("emailAddress", "emailAddress", NameOID.EMAIL_ADDRESS),
    ("serialNumber", "serialNumber", NameOID.SERIAL_NUMBER),
    ("SN", "surname", NameOID.SURNAME),
    ("GN", "givenName", NameOID.GIVEN_NAME),
    ("title", "title", NameOID.TITLE),
    ("initials", "initials", NameOID.INITIALS),
    ("pseudonym", "pseudonym", NameOID.PSEUDONYM),
    ("DC", "domainComponent", NameOID.DOMAIN_COMPONENT),
    ("UID", "userId", NameOID.USER_ID),
    ("postalCode", "postalCode", NameOID.POSTAL_CODE),
]

_OID_BY_NAME = {}
_NAMES_BY_OID = {}
for _short, _long, _oid in NAME_ATTRIBUTES:
    _OID_BY_NAME[_short.lower()] = _oid
    _OID_BY_NAME[_long.lower()] = _oid
    _NAMES_BY_OID[_oid] = (_short, _long)

EXTRA_ATTRIBUTES = {
    "challengepassword": AttributeOID.CHALLENGE_PASSWORD,
    "unstructuredname": AttributeOID.UNSTRUCTURED_NAME,
}


def _name_from_dn(dn: dict) -> x509.Name:
    attributes = []
    for field, value in dn.items():
        oid = _OID_BY_NAME.get(str(field).lower())
        if oid is None:
            raise ValueError(f"dn: {field} is not a recognized name")
        values = value if isinstance(value, (list, tuple)) else [value]
        for v in values:
            attributes.append(x509.NameAttribute(oid, str(v)))
    if not attributes:
        raise ValueError("dn must contain at least one attribute")
    return x509.Name(attributes)


def _subject_dict(name: x509.Name, use_shortnames: bool) -> dict:
    subject = {}
    for attr in name:
        names = _NAMES_BY_OID.get(attr.oid)
        if names is None:
            key = attr.oid.dotted_string
        else:
            key = names[0] if use_shortnames else names[1]
        if key in subject:
            existing = subject[key]
            if not isinstance(existing, list):
                existing = [existing]
            existing.append(attr.value)
            subject[key] = existing
        else:
            subject[key] = attr.value
    return subject


def _signing_hash(key, configargs: dict):
    if isinstance(key, (ed25519.Ed25519PrivateKey, ed448.Ed448PrivateKey)):
        return None
    return lookup_digest(configargs.get("digest_alg") or get_settings().default_digest)


def _public_key_algorithm(public_key) -> str:
    return type(public_key).__name__.lstrip("_").replace("PublicKey", "")


def _describe_csr(csr: x509.CertificateSigningRequest) -> str:
    lines = [
        "Certificate Request:",
        "    Data:",
        "        Version: 1 (0x0)",
        f"        Subject: {csr.subject.rfc4514_string()}",
        "        Subject Public Key Info:",
        f"            Public Key Algorithm: {_public_key_algorithm(csr.public_key())}",
    ]
    return "\n".join(lines) + "\n"


def _describe_certificate(cert: x509.Certificate) -> str:
    lines = [
        "Certificate:",
        "    Data:",
        f"        Version: {cert.version.value + 1} (0x{cert.version.value:x})",
        f"        Serial Number: {cert.serial_number}",
        f"        Issuer: {cert.issuer.rfc4514_string()}",
        "        Validity",
        f"            Not Before: {cert.not_valid_before_utc:%b %d %H:%M:%S %Y} GMT",
        f"            Not After : {cert.not_valid_after_utc:%b %d %H:%M:%S %Y} GMT",
        f"        Subject: {cert.subject.rfc4514_string()}",
        "        Subject Public Key Info:",
        f"            Public Key Algorithm: {_public_key_algorithm(cert.public_key())}",
    ]
    return "\n".join(lines) + "\n"


def _csr_pem(csr, notext) -> str:
    handle = load_csr(csr)
    pem = handle.csr.public_bytes(serialization.Encoding.PEM).decode('ascii')
    return pem if notext else _describe_csr(handle.csr) + pem


def _certificate_pem(x509cert, notext) -> str:
    handle = load_certificate(x509cert)
    pem = handle.cert.public_bytes(serialization.Encoding.PEM).decode('ascii')
    return pem if notext else _describe_certificate(handle.cert) + pem


@reports_errors
def csr_export_to_file(csr, outfilename, notext=True):
    write_file(outfilename, _csr_pem(csr, notext))
    return True


@reports_errors
def csr_export(csr, notext=True):
    return _csr_pem(csr, notext)


@reports_errors
def csr_get_subject(csr, use_shortnames=True):
    return _subject_dict(load_csr(csr).csr.subject, use_shortnames)


@reports_errors
def csr_new(dn, privkey, configargs=None, extraattribs=None):
    """
    Build and sign a CSR for *dn* with *privkey*.

    configargs: digest_alg (defaults to the configured default digest).
    extraattribs: challengePassword, unstructuredName.
    """
    configargs = configargs or {}
    key = load_private_key(privkey).key
    builder = x509.CertificateSigningRequestBuilder().subject_name(_name_from_dn(dn))
    for field, value in (extraattribs or {}).items():
        oid = EXTRA_ATTRIBUTES.get(str(field).lower())
        if oid is None:
            raise ValueError(f"attribs: {field} is not a recognized attribute name")
        builder = builder.add_attribute(oid, str(value).encode('utf-8'))
    return CsrHandle(builder.sign(key, _signing_hash(key, configargs)))


@reports_errors
def x509_export_to_file(x509cert, outfilename, notext=True):
    write_file(outfilename, _certificate_pem(x509cert, notext))
    return True


@reports_errors
def x509_export(x509cert, notext=True):
    return _certificate_pem(x509cert, notext)


@reports_errors
def x509_read(x509certdata):
    return load_certificate(x509certdata)
