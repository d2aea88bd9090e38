"""
cryptokit Configuration

Settings are read from the environment once, at import time.
"""
import os

# ============================================================================
# Environment
# ============================================================================

# Upper bound on redraws in the rejection-sampling loops. Only a broken
# random source can exhaust it.
MAX_REJECTIONS = int(os.environ.get("CRYPTOKIT_MAX_REJECTIONS", "1024"))

# Word list used by the bip39 passphrase codec.
BIP39_LANGUAGE = os.environ.get("CRYPTOKIT_BIP39_LANGUAGE", "english")

# ============================================================================
# Protocol constants
# ============================================================================

DEFAULT_SEED_SIZE = 32  # bytes
SIGNATURE_ALGORITHM = "ed25519"

BIP39_32_BYTE_WORD_COUNT = 24
NICEWARE_32_BYTE_WORD_COUNT = 16
