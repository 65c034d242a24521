"""异常模块单元测试。"""

import pytest

from yisi_svc.exceptions import (
    ErrorKind,
    MalformedResponseError,
    MissingCredentialError,
    NetworkError,
    UnauthorizedError,
    ValidationFailedError,
    VendorError,
    YisiError,
)


@pytest.mark.unit
class TestErrorTaxonomy:
    """异常类别与状态码测试。"""

    def test_missing_credential_names_vendor(self):
        err = MissingCredentialError("DeepSeek")
        assert err.message == "Please set your DeepSeek API Key in Settings."
        assert err.kind == ErrorKind.MISSING_CREDENTIAL
        assert err.status_code == 400
        assert not err.retryable

    def test_missing_credential_for_image(self):
        err = MissingCredentialError("Gemini", usage="image")
        assert err.message == "Please set your Gemini API Key in Settings for image recognition."

    def test_vendor_error_carries_raw_body(self):
        err = VendorError(429, '{"error":"rate limited"}', "OpenAI")
        assert err.status == 429
        assert err.body == '{"error":"rate limited"}'
        assert "OpenAI HTTP 429" in err.message
        assert err.retryable
        assert err.status_code == 502

    def test_unauthorized_is_vendor_error_but_not_retryable(self):
        """凭证被拒属于供应商错误，但按类别标签不重试。"""
        err = UnauthorizedError(401, "invalid key", "Zhipu AI")
        assert isinstance(err, VendorError)
        assert err.kind == ErrorKind.UNAUTHORIZED
        assert not err.retryable
        assert err.status_code == 401

    def test_network_error_retryable(self):
        err = NetworkError("timed out", "Gemini")
        assert err.retryable
        assert err.error_type == "network_error"

    def test_malformed_response_keys(self):
        err = MalformedResponseError("no keys", ["a", "b"])
        assert err.available_keys == ["a", "b"]
        assert not err.retryable

    def test_validation_failed(self):
        err = ValidationFailedError("Empty translation result")
        assert err.reason == "Empty translation result"
        assert err.status_code == 422

    def test_all_inherit_base(self):
        for err in (
            MissingCredentialError("OpenAI"),
            NetworkError("x"),
            VendorError(500, "x"),
            MalformedResponseError("x"),
            ValidationFailedError("x"),
        ):
            assert isinstance(err, YisiError)
            assert str(err) == err.message
