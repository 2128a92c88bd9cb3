import logging
import uuid


class TestCorrelationIdMiddleware:
    def test_returns_provided_request_id(self, client):
        custom_id = "my-custom-request-id-123"
        response = client.get("/health", HTTP_X_REQUEST_ID=custom_id)
        assert response["X-Request-ID"] == custom_id

    def test_generates_uuid_when_no_request_id(self, client):
        response = client.get("/health")
        request_id = response["X-Request-ID"]
        assert uuid.UUID(request_id).hex == request_id

    def test_correlation_id_in_logs(self, client, caplog):
        custom_id = "log-test-correlation-456"
        with caplog.at_level(logging.INFO):
            client.get("/health", HTTP_X_REQUEST_ID=custom_id)
        found = any(custom_id in record.getMessage() for record in caplog.records)
        assert found, (
            f"correlation_id '{custom_id}' not found in log records: "
            f"{[r.getMessage() for r in caplog.records]}"
        )


class TestSensitiveDataMasking:
    def test_clabe_masked_in_log_output(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "bank": "CLABE 012180001234567891"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "012180001234567891" not in result["bank"]
        assert "***MASKED***" in result["bank"]

    def test_card_number_masked_in_log_output(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "card": "4152313212345678"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "4152313212345678" not in result["card"]

    def test_password_masked_in_log_output(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "data": "password='s3cret123'"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "s3cret123" not in result["data"]
        assert "***MASKED***" in result["data"]

    def test_phone_numbers_are_not_masked(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "affiliate_id": "5512340001"}
        result = mask_sensitive_data(None, None, event_dict)
        assert result["affiliate_id"] == "5512340001"

    def test_non_string_values_untouched(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "quantity": 12}
        result = mask_sensitive_data(None, None, event_dict)
        assert result["quantity"] == 12
