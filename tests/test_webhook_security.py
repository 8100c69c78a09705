from portal.webhook_security import (
    WebhookError,
    compute_hmac_sha256,
    constant_time_compare,
    is_valid_n8n_signature,
)

SECRET = "shared-secret"
BODY = b'{"action": "list"}'


def test_constant_time_compare():
    assert constant_time_compare("abc", "abc")
    assert not constant_time_compare("abc", "abd")
    assert not constant_time_compare("", "")
    assert not constant_time_compare(None, "abc")


def test_plain_secret_signature():
    assert is_valid_n8n_signature(SECRET, SECRET, BODY)
    assert not is_valid_n8n_signature("wrong", SECRET, BODY)


def test_hmac_signature():
    signature = f"sha256={compute_hmac_sha256(SECRET, BODY)}"
    assert is_valid_n8n_signature(signature, SECRET, BODY)
    assert not is_valid_n8n_signature(signature, SECRET, b'{"action": "delete"}')


def test_unset_secret_rejects_everything():
    assert not is_valid_n8n_signature(SECRET, None, BODY)
    assert not is_valid_n8n_signature(None, SECRET, BODY)


def test_webhook_error_body():
    error = WebhookError(409, "TIME_SLOT_OCCUPIED", success=False, alternative_slots=["11:00"])
    assert error.to_dict() == {
        "error": "TIME_SLOT_OCCUPIED",
        "success": False,
        "alternative_slots": ["11:00"],
    }
    assert WebhookError(401, "Invalid API key", "INVALID_API_KEY").to_dict() == {
        "error": "Invalid API key",
        "code": "INVALID_API_KEY",
    }
