# Protobuf signature type codes to display names.
SIGNATURE_TYPE_NAMES = {
    2: 'CONTRACT',
    3: 'ED25519',
    4: 'RSA_3072',
    5: 'ECDSA_384',
    6: 'ECDSA_SECP256K1',
}

UNKNOWN = 'UNKNOWN'

def get_name(code: int) -> str:
    return SIGNATURE_TYPE_NAMES.get(code, UNKNOWN)
