"""Tests for pixel_image.core.numeric — sample types, promotion and clamp-cast."""

import numpy as np
import pytest
from pixel_image.core.errors import UnsupportedSampleType
from pixel_image.core.numeric import (
    SAMPLE_TYPES,
    clamp_cast,
    limits,
    operand_dtype,
    promote,
    sample_dtype,
    signed,
    wider,
)


class TestSampleDtype:
    @pytest.mark.parametrize('sample', [np.uint8, np.int16, np.uint16, np.int32, np.float32, np.float64])
    def test_supported(self, sample):
        assert sample_dtype(sample) == np.dtype(sample)

    def test_accepts_names(self):
        assert sample_dtype('uint16') == np.dtype(np.uint16)

    @pytest.mark.parametrize('sample', [np.int8, np.int64, np.uint32, np.complex64, np.bool_])
    def test_rejects_other_dtypes(self, sample):
        with pytest.raises(UnsupportedSampleType):
            sample_dtype(sample)

    def test_rejects_garbage(self):
        with pytest.raises(UnsupportedSampleType):
            sample_dtype('not-a-dtype')

    def test_is_a_type_error(self):
        with pytest.raises(TypeError):
            sample_dtype(np.int64)

    def test_six_supported_types(self):
        assert len(SAMPLE_TYPES) == 6


class TestWiderAndSigned:
    def test_wider_steps_up(self):
        assert wider(np.uint8) == np.uint16
        assert wider(np.int8) == np.int16
        assert wider(np.int16) == np.int32
        assert wider(np.uint16) == np.uint32
        assert wider(np.int32) == np.int64
        assert wider(np.float32) == np.float64

    def test_wider_falls_back_to_double(self):
        assert wider(np.int64) == np.float64
        assert wider(np.float64) == np.float64

    def test_signed(self):
        assert signed(np.uint8) == np.int8
        assert signed(np.uint16) == np.int16
        assert signed(np.int32) == np.int32
        assert signed(np.float32) == np.float32


class TestPromote:
    def test_float_wins(self):
        assert promote(np.uint8, np.float32) == np.float64
        assert promote(np.float32, np.int16) == np.float64
        assert promote(np.float32, np.float32) == np.float64

    def test_signed_coefficient_widens_larger_side(self):
        # uint8 sample with an int32 coefficient
        assert promote(np.uint8, np.int32) == np.int64

    def test_signed_sample_widens_larger_side(self):
        assert promote(np.int16, np.uint8) == np.int32
        assert promote(np.uint8, np.int16) == np.int32

    def test_both_unsigned(self):
        assert promote(np.uint16, np.uint8) == np.uint32
        assert promote(np.uint8, np.uint8) == np.uint16

    def test_both_signed_same_size(self):
        assert promote(np.int32, np.int32) == np.int64

    def test_equal_size_mixed_signedness_is_signed(self):
        assert promote(np.uint16, np.int16) == np.int32
        assert promote(np.int16, np.uint16) == np.int32
        assert promote(np.int32, np.uint32) == np.int64

    def test_no_wider_integer_goes_float(self):
        assert promote(np.uint8, np.int64) == np.float64

    def test_intermediate_holds_both_ranges(self):
        for t in SAMPLE_TYPES:
            for t2 in SAMPLE_TYPES:
                inter = promote(t, t2)
                lo, hi = limits(inter)
                for dt in (t, t2):
                    dlo, dhi = limits(dt)
                    assert lo <= dlo and dhi <= hi, (t, t2, inter)


class TestOperandDtype:
    def test_python_int_is_int32(self):
        assert operand_dtype(2) == np.int32

    def test_big_python_int(self):
        assert operand_dtype(2**40) == np.int64
        assert operand_dtype(2**70) == np.float64

    def test_python_float(self):
        assert operand_dtype(0.5) == np.float64

    def test_bool(self):
        assert operand_dtype(True) == np.uint8

    def test_numpy_scalar(self):
        assert operand_dtype(np.uint16(3)) == np.uint16
        assert operand_dtype(np.float32(0.5)) == np.float32


class TestClampCast:
    def test_saturates_into_uint8(self):
        out = clamp_cast(np.array([300, -5, 42]), np.uint8)
        assert out.dtype == np.uint8
        assert out.tolist() == [255, 0, 42]

    def test_truncates_toward_zero(self):
        out = clamp_cast(np.array([1.9, -1.9, 2.5]), np.int16)
        assert out.tolist() == [1, -1, 2]

    def test_narrowing_int32_to_int16(self):
        out = clamp_cast(np.array([-100000, 100000], dtype=np.int32), np.int16)
        assert out.tolist() == [-32768, 32767]

    def test_unsigned_to_signed_same_size(self):
        out = clamp_cast(np.array([65535, 5], dtype=np.uint16), np.int16)
        assert out.tolist() == [32767, 5]

    def test_signed_to_unsigned(self):
        out = clamp_cast(np.array([-1, 70], dtype=np.int16), np.uint8)
        assert out.tolist() == [0, 70]

    def test_double_to_float32_saturates(self):
        out = clamp_cast(np.array([1e300, -1e300]), np.float32)
        big = np.finfo(np.float32).max
        assert out.tolist() == [float(big), -float(big)]

    def test_explicit_intermediate(self):
        out = clamp_cast(np.array([200], dtype=np.uint8), np.uint8, np.dtype(np.uint16))
        assert out.tolist() == [200]

    def test_limits(self):
        assert limits(np.uint8) == (0, 255)
        assert limits(np.int16) == (-32768, 32767)
        assert limits(np.float32)[1] == float(np.finfo(np.float32).max)
