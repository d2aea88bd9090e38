"""
tests/test_uniform_statistics.py

Psi tests (G-tests) of the uniform samplers.

The psi statistic is similar to chi^2 and, scaled appropriately,
converges to a chi^2 distribution as the number of samples grows, so
standard chi^2 critical values apply. With 100 degrees of freedom and
alpha = 0.01 the critical value is 135.807 (NIST/SEMATECH e-Handbook of
Statistical Methods, sec. 1.3.6.7.4).

To keep spurious suite failures rare, each test runs up to NTRIALS
trials and passes if NPASSES_MIN of them pass, making the per-test false
failure rate alpha^2.

Some tests have the reverse sense: they feed a deliberately broken
sampler and require the psi test to reject it, which checks that the
tests have the power to detect the bugs they guard against. The broken
samplers live here only.
"""

import math

import pytest
from nacl.utils import random as random_bytes

from cryptokit.crypto.random import uniform, uniform_01

NSAMPLES = 100000
DF = 100
CHI2_CRITICAL = 135.807
NPASSES_MIN = 1
NTRIALS = 2

pytestmark = pytest.mark.slow


def trials(ntrials, npasses_min, f):
    npass = 0
    trial = 0
    while npass < npasses_min and trial < ntrials:
        if f():
            npass += 1
        trial += 1
    return npass, trial


def psi(counts, probabilities, n):
    assert len(counts) == DF
    assert len(probabilities) == DF
    total = 0.0
    for c, p in zip(counts, probabilities):
        if c == 0:
            continue
        total += c * math.log(c / (n * p))
    return 2 * total


def sample_counts(sample):
    counts = [0] * DF
    for _ in range(NSAMPLES):
        counts[sample()] += 1
    return counts


def assert_psi_accepts(probability, sample):
    probabilities = [probability(i) for i in range(DF)]
    npass, trial = trials(
        NTRIALS, NPASSES_MIN,
        lambda: psi(sample_counts(sample), probabilities, NSAMPLES) <= CHI2_CRITICAL)
    assert npass >= NPASSES_MIN, f"{npass} of {trial} psi trials"


def assert_psi_rejects(probability, sample):
    probabilities = [probability(i) for i in range(DF)]
    needed = NTRIALS - NPASSES_MIN + 1
    npass, trial = trials(
        NTRIALS, needed,
        lambda: psi(sample_counts(sample), probabilities, NSAMPLES) > CHI2_CRITICAL)
    assert npass >= needed, f"{npass} of {trial} psi reject trials"


def uniform_bucket(i):
    return 1 / DF


def byte_mod_df(i):
    # distribution of (uniform byte) % DF
    return (256 // DF + (i < 256 % DF)) / 256


def reject(x0, f):
    while True:
        x = f()
        if x != x0:
            return x


def clz32(x):
    return 32 - x.bit_length()


# ============================================================================
# Broken samplers (alternative hypotheses)
# ============================================================================

def bad_uniform(n):
    """Like uniform, but with a bug: wrong shift on the fourth byte."""
    minimum = (2 ** 53) % n
    while True:
        b = random_bytes(7)
        l32 = (b[0] | (b[1] << 8) | (b[2] << 16) | (b[3] << 26)) & 0xFFFFFFFF
        h21 = b[4] | (b[5] << 8) | ((b[6] & 0x1F) << 16)
        x = (2 ** 32) * h21 + l32
        if x >= minimum:
            return x % n


def uniform_01_lowprec():
    """Like uniform_01, but for binary16 numbers with 11 bits of precision."""
    def uniform16():
        b = random_bytes(2)
        return b[0] | (b[1] << 8)

    # emin = -14, so a single 16-bit word is plenty
    e = clz32(uniform16()) - 16

    # normal odd 16-bit significand
    s0 = uniform16() | 0x8001

    # Round to an 11-bit significand in [2^15, 2^16], a multiple of 2^5.
    hack = 3.0 * 2.0 ** (16 - 11 + 53 - 2)
    s = (s0 + hack) - hack

    return s * 2.0 ** (-16 - e)


def bad_uniform_01_lowprec():
    """Naive scaling: never yields 0 < x < 2^-11."""
    return uniform(2 ** 11) / 2 ** 11


def bad_uniform_01_badshift():
    """Like uniform_01, but with a bug: wrong shift on the fourth byte."""
    def uniform32():
        b = random_bytes(4)
        return (b[0] | (b[1] << 8) | (b[2] << 16) | (b[3] << 25)) & 0xFFFFFFFF

    e = 0
    x = 0
    while e < 1088:
        x = uniform32()
        if x != 0:
            break
        e += 32
    e += clz32(x)

    hi = uniform32() | 0x80000000
    lo = uniform32() | 0x00000001
    s = hi * 2 ** 32 + lo
    return math.ldexp(float(s), -64 - e)


# ============================================================================
# uniform(n)
# ============================================================================

def test_uniform_df_is_uniform():
    assert_psi_accepts(uniform_bucket, lambda: uniform(DF))


def test_modulo_bias_is_detected():
    # uniform(2*DF + 1) % DF over-weights bucket 0
    assert_psi_rejects(uniform_bucket, lambda: uniform(2 * DF + 1) % DF)


def test_uniform_256_mod_df_has_expected_bias():
    assert_psi_accepts(byte_mod_df, lambda: uniform(256) % DF)


# The shift bug in bad_uniform is not caught by the tests above, which is
# why the individual bytes of a 53-bit sample are tested as well.

def test_bits_24_to_32_of_bad_uniform_are_rejected():
    assert_psi_rejects(byte_mod_df, lambda: ((bad_uniform(2 ** 53) >> 24) & 0xFF) % DF)


@pytest.mark.parametrize("shift", [0, 8, 16, 24, 32, 40, 45])
def test_bytes_of_uniform_2_53_are_uniform(shift):
    assert_psi_accepts(byte_mod_df, lambda: ((uniform(2 ** 53) >> shift) & 0xFF) % DF)


# ============================================================================
# uniform_01()
# ============================================================================

# dist16[i] = Pr[i/100 <= min(fp16(U), 99) < (i + 1)/100], where fp16(U)
# rounds a uniform real in [0, 1] to the nearest binary16 number.
DIST16 = [
    9.993438720703124e-3, 9.993438720703124e-3,
    0.0100048828125, 0.00998199462890625,
    0.0100048828125, 0.0100048828125,
    0.0099591064453125, 0.0100048828125,
    0.0100048828125, 0.0100048828125,
    0.0100048828125, 0.0100048828125,
    0.009913330078125, 0.0100048828125,
    0.0100048828125, 0.0100048828125,
    0.0100048828125, 0.0100048828125,
    0.0100048828125, 0.0100048828125,
    0.0100048828125, 0.0100048828125,
    0.0100048828125, 0.0100048828125,
    0.00994384765625, 0.0098828125,
    0.0100048828125, 0.0100048828125,
    0.0100048828125, 0.0100048828125,
    0.0100048828125, 0.0100048828125,
    0.0100048828125, 0.0100048828125,
    0.0100048828125, 0.0100048828125,
    0.0100048828125, 0.0100048828125,
    0.0100048828125, 0.0100048828125,
    0.0100048828125, 0.0100048828125,
    0.0100048828125, 0.0100048828125,
    0.0100048828125, 0.0100048828125,
    0.0100048828125, 0.0100048828125,
    0.0100048828125, 0.0098828125,
    0.0098828125, 0.0098828125,
    0.010126953125, 0.0098828125,
    0.010126953125, 0.0098828125,
    0.010126953125, 0.0098828125,
    0.010126953125, 0.0098828125,
    0.010126953125, 0.0098828125,
    0.010126953125, 0.0098828125,
    0.010126953125, 0.0098828125,
    0.010126953125, 0.0098828125,
    0.010126953125, 0.0098828125,
    0.010126953125, 0.0098828125,
    0.010126953125, 0.0098828125,
    0.010126953125, 0.0098828125,
    0.0098828125, 0.010126953125,
    0.0098828125, 0.010126953125,
    0.0098828125, 0.010126953125,
    0.0098828125, 0.010126953125,
    0.0098828125, 0.010126953125,
    0.0098828125, 0.010126953125,
    0.0098828125, 0.010126953125,
    0.0098828125, 0.010126953125,
    0.0098828125, 0.010126953125,
    0.0098828125, 0.010126953125,
    0.0098828125, 0.010126953125,
    0.0098828125, 0.01037109375
]


def test_uniform_01_is_uniform_over_buckets():
    # Not exact, but each bucket's error from 1/DF is far below what psi
    # can see.
    assert_psi_accepts(uniform_bucket, lambda: math.floor(reject(1.0, uniform_01) * DF))


def lowprec_bucket():
    x = uniform_01_lowprec()
    for i in range(DF):
        if x < (i + 1) / DF:
            return i
    assert x == 1
    return DF - 1


def test_uniform_01_lowprec_matches_binary16_distribution():
    assert_psi_accepts(lambda i: DIST16[i], lowprec_bucket)


def has_small_number(sample):
    for _ in range(NSAMPLES):
        x = sample()
        if 0 < x < 2 ** -11:
            return True
    return False


def test_uniform_01_lowprec_yields_small_numbers():
    # Pr[0 < x < 2^-11] >= 2^-12, so all of 10^5 samples missing it has
    # probability below 10^-10.
    npass, trial = trials(NTRIALS, NPASSES_MIN, lambda: has_small_number(uniform_01_lowprec))
    assert npass >= NPASSES_MIN, f"{npass} of {trial} small number trials"


def test_naive_lowprec_never_yields_small_numbers():
    needed = NTRIALS - NPASSES_MIN + 1
    npass, trial = trials(
        NTRIALS, needed, lambda: not has_small_number(bad_uniform_01_lowprec))
    assert npass >= needed, f"{npass} of {trial} small number trials"


def test_low_bits_of_uniform_01_are_uniform():
    assert_psi_accepts(
        uniform_bucket,
        lambda: math.floor(((reject(1.0, uniform_01) * 64) % 1) * DF))


def test_bad_shift_uniform_01_is_rejected():
    assert_psi_rejects(
        uniform_bucket,
        lambda: math.floor(reject(1.0, bad_uniform_01_badshift) * DF))
