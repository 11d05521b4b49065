from config.settings import mask_sensitive_data


class TestSensitiveDataMasking:
    def test_password_masked_in_log_output(self):
        event_dict = {"event": "test", "data": "password='s3cret123'"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "s3cret123" not in result["data"]
        assert "***MASKED***" in result["data"]

    def test_token_masked_in_log_output(self):
        event_dict = {"event": "test", "header": "token=abc123xyz"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "abc123xyz" not in result["header"]
        assert result["header"] == "token=***MASKED***"

    def test_authorization_masked_case_insensitive(self):
        event_dict = {"event": "test", "header": "Authorization: Bearer-xyz"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "Bearer-xyz" not in result["header"]

    def test_non_sensitive_data_unchanged(self):
        event_dict = {"event": "order.created", "customer_name": "John"}
        result = mask_sensitive_data(None, None, event_dict)
        assert result["customer_name"] == "John"
        assert result["event"] == "order.created"

    def test_non_string_values_untouched(self):
        event_dict = {"event": "order.created", "order_id": 7}
        result = mask_sensitive_data(None, None, event_dict)
        assert result["order_id"] == 7
