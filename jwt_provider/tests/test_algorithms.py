"""Tests for the HMAC algorithm enumeration and config-time validation."""
import pytest

from jwt_provider.algorithms import HashingAlgorithm, resolve_algorithm, validate_algorithm
from jwt_provider.errors import InvalidAttribute, UnsupportedAlgorithm


@pytest.mark.parametrize("name", ["HS256", "HS384", "HS512"])
def test_resolve_hmac_algorithms(name):
    alg = resolve_algorithm(name)
    assert alg is HashingAlgorithm(name)
    assert alg.value == name


def test_choices_are_closed_set():
    assert HashingAlgorithm.choices() == ["HS256", "HS384", "HS512"]


def test_unknown_algorithm_rejected():
    with pytest.raises(UnsupportedAlgorithm) as exc:
        resolve_algorithm("HS1024")
    assert "not a supported signing algorithm" in str(exc.value)
    assert "HS256, HS384, HS512" in str(exc.value)


@pytest.mark.parametrize("name", ["RS256", "ES384", "PS512", "EdDSA"])
def test_asymmetric_algorithm_redirects_to_signed_token(name):
    with pytest.raises(UnsupportedAlgorithm) as exc:
        resolve_algorithm(name)
    assert "jwt_signed_token" in str(exc.value)


def test_none_algorithm_rejected():
    with pytest.raises(UnsupportedAlgorithm):
        resolve_algorithm("none")


def test_names_are_case_sensitive():
    with pytest.raises(UnsupportedAlgorithm):
        resolve_algorithm("hs256")


def test_validate_accepts_supported():
    warnings, errors = validate_algorithm("HS384", "algorithm")
    assert warnings == []
    assert errors == []


def test_validate_rejects_non_string():
    _, errors = validate_algorithm(256, "algorithm")
    assert len(errors) == 1
    assert isinstance(errors[0], InvalidAttribute)
    assert str(errors[0]) == "algorithm must be a string."


def test_validate_reports_rs256_without_raising():
    _, errors = validate_algorithm("RS256", "alg")
    assert len(errors) == 1
    assert isinstance(errors[0], UnsupportedAlgorithm)
    assert errors[0].attribute == "alg"
    assert "RSA/ECDSA" in errors[0].message
