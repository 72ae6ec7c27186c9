from datetime import datetime, timezone

from backend.app.services.admission import BookingRequest

# Tuesday 2025-06-03, 10:15 on the salon clock
NOW = datetime(2025, 6, 3, 9, 15, tzinfo=timezone.utc)


class RecordingNotifier:
    def __init__(self) -> None:
        self.sent: list[dict] = []

    async def send(self, payload: dict) -> None:
        self.sent.append(payload)


def booking_request(**overrides) -> BookingRequest:
    values = {
        "id": "BK-TEST0001",
        "customer_name": "Anna Schmidt",
        "customer_phone": "+49 170 1234567",
        "customer_email": "anna@example.com",
        "service_ids": ["mani-classic", "nail-art"],
        "date": "2025-06-10",
        "time": "14:00",
        "notes": "",
    }
    values.update(overrides)
    return BookingRequest(**values)


def booking_payload(**overrides) -> dict:
    payload = {
        "id": "BK-API0001",
        "customer_name": "Linh Nguyen",
        "customer_phone": "+49 151 7654321",
        "customer_email": "linh@example.com",
        "services": ["gel-new", "nail-art"],
        "date": "2025-06-10",
        "time": "14:00",
        "notes": "French tips",
    }
    payload.update(overrides)
    return payload
