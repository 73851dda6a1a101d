"""
API tests for booking appointments and moving them through their lifecycle.
"""

import uuid
from datetime import datetime, timedelta

import pytest

from vetmarket.models import Appointment, AppointmentStatus
from vetmarket.utils.datetime_utils import ensure_utc

# Wednesday; the default schedule is 09:00-17:00 Monday to Friday
WEDNESDAY_TEN = "2024-06-05T10:00:00Z"


@pytest.fixture
async def bookable(async_session, provider_profile, service_factory, availability_factory):
    """A provider offering a 45 minute service on the default weekday schedule."""
    service = await service_factory.create(async_session, provider_profile)
    await availability_factory.create(async_session, provider_profile)
    return service


def booking(profile, service, at=WEDNESDAY_TEN, **extra):
    return {
        "providerProfileId": str(profile.id),
        "serviceId": str(service.id),
        "appointmentTime": at,
        **extra,
    }


class TestRequestAppointment:
    async def test_request(
        self, client, async_session, pet_owner, provider_profile, bookable, auth_headers
    ):
        response = await client.post(
            "/api/appointments",
            json=booking(provider_profile, bookable, notes="Cat is shy"),
            headers=auth_headers(pet_owner),
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["status"] == "Requested"
        assert data["petOwnerId"] == str(pet_owner.id)
        assert data["notes"] == "Cat is shy"

        stored = await async_session.get(Appointment, uuid.UUID(data["id"]))
        start = ensure_utc(stored.appointment_time)
        assert start == ensure_utc(datetime(2024, 6, 5, 10, 0))
        assert ensure_utc(stored.estimated_end_time) - start == timedelta(minutes=45)

    async def test_missing_fields(self, client, pet_owner, auth_headers):
        response = await client.post(
            "/api/appointments", json={"notes": "hi"}, headers=auth_headers(pet_owner)
        )

        assert response.status_code == 400
        assert response.json()["message"] == (
            "Provider profile ID, service ID, and appointment time are required"
        )

    async def test_unknown_profile(
        self, client, pet_owner, provider_profile, bookable, auth_headers
    ):
        payload = {**booking(provider_profile, bookable), "providerProfileId": str(uuid.uuid4())}

        response = await client.post(
            "/api/appointments", json=payload, headers=auth_headers(pet_owner)
        )

        assert response.status_code == 404
        assert response.json()["message"] == "Provider profile not found"

    async def test_service_of_another_provider(
        self,
        client,
        async_session,
        pet_owner,
        provider_profile,
        bookable,
        user_factory,
        profile_factory,
        service_factory,
        auth_headers,
    ):
        other_provider = await user_factory.create_provider(async_session)
        other = await profile_factory.create(async_session, other_provider)
        foreign_service = await service_factory.create(async_session, other)

        response = await client.post(
            "/api/appointments",
            json=booking(provider_profile, foreign_service),
            headers=auth_headers(pet_owner),
        )

        assert response.status_code == 404
        assert response.json()["message"] == (
            "Service not found or does not belong to this provider"
        )

    async def test_provider_without_schedule(
        self, client, async_session, pet_owner, provider_profile, service_factory, auth_headers
    ):
        service = await service_factory.create(async_session, provider_profile)

        response = await client.post(
            "/api/appointments",
            json=booking(provider_profile, service),
            headers=auth_headers(pet_owner),
        )

        assert response.status_code == 404
        assert response.json()["message"] == "Provider has not set their availability"

    @pytest.mark.parametrize(
        "at",
        [
            "2024-06-05T16:30:00Z",  # 45 minutes would run past 17:00
            "2024-06-05T08:30:00Z",
            "2024-06-09T10:00:00Z",  # Sunday
        ],
    )
    async def test_outside_availability(
        self, client, pet_owner, provider_profile, bookable, auth_headers, at
    ):
        response = await client.post(
            "/api/appointments",
            json=booking(provider_profile, bookable, at=at),
            headers=auth_headers(pet_owner),
        )

        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "The requested time is outside the provider's availability"
        assert body["error"]["code"] == "BUSINESS_RULE_ERROR"

    async def test_last_slot_of_the_day(
        self, client, pet_owner, provider_profile, bookable, auth_headers
    ):
        response = await client.post(
            "/api/appointments",
            json=booking(provider_profile, bookable, at="2024-06-05T16:15:00Z"),
            headers=auth_headers(pet_owner),
        )
        assert response.status_code == 201

    async def test_overlap_rejected(
        self, client, pet_owner, provider_profile, bookable, auth_headers
    ):
        headers = auth_headers(pet_owner)
        first = await client.post(
            "/api/appointments", json=booking(provider_profile, bookable), headers=headers
        )
        assert first.status_code == 201

        clash = await client.post(
            "/api/appointments",
            json=booking(provider_profile, bookable, at="2024-06-05T10:30:00Z"),
            headers=headers,
        )
        assert clash.status_code == 400
        assert clash.json()["message"] == "The requested time conflicts with another appointment"

        # Starting exactly when the first visit ends is fine
        back_to_back = await client.post(
            "/api/appointments",
            json=booking(provider_profile, bookable, at="2024-06-05T10:45:00Z"),
            headers=headers,
        )
        assert back_to_back.status_code == 201

    async def test_cancelled_slot_is_free(
        self,
        client,
        async_session,
        pet_owner,
        provider_profile,
        bookable,
        appointment_factory,
        auth_headers,
    ):
        await appointment_factory.create(
            async_session,
            pet_owner,
            provider_profile,
            appointment_time=datetime(2024, 6, 5, 10, 0),
            estimated_end_time=datetime(2024, 6, 5, 10, 45),
            status=AppointmentStatus.CANCELLED,
        )

        response = await client.post(
            "/api/appointments",
            json=booking(provider_profile, bookable),
            headers=auth_headers(pet_owner),
        )
        assert response.status_code == 201

    async def test_providers_cannot_book(
        self, client, provider, provider_profile, bookable, auth_headers
    ):
        response = await client.post(
            "/api/appointments",
            json=booking(provider_profile, bookable),
            headers=auth_headers(provider),
        )
        assert response.status_code == 403


class TestListAppointments:
    async def test_my_appointments_soonest_first(
        self, client, async_session, pet_owner, provider_profile, appointment_factory, auth_headers
    ):
        later = await appointment_factory.create(
            async_session, pet_owner, provider_profile, appointment_time=datetime(2024, 7, 1, 9, 0)
        )
        sooner = await appointment_factory.create(
            async_session, pet_owner, provider_profile, appointment_time=datetime(2024, 6, 1, 9, 0)
        )

        response = await client.get(
            "/api/appointments/my-appointments", headers=auth_headers(pet_owner)
        )

        body = response.json()
        assert body["count"] == 2
        assert [a["id"] for a in body["data"]] == [str(sooner.id), str(later.id)]

    async def test_provider_status_filter(
        self,
        client,
        async_session,
        pet_owner,
        provider,
        provider_profile,
        appointment_factory,
        auth_headers,
    ):
        requested = await appointment_factory.create(
            async_session, pet_owner, provider_profile, status=AppointmentStatus.REQUESTED
        )
        await appointment_factory.create(async_session, pet_owner, provider_profile)
        headers = auth_headers(provider)

        everything = await client.get("/api/appointments/provider", headers=headers)
        assert everything.json()["count"] == 2

        filtered = await client.get(
            "/api/appointments/provider", params={"status": "Requested"}, headers=headers
        )
        assert [a["id"] for a in filtered.json()["data"]] == [str(requested.id)]

    async def test_provider_bad_status_filter(
        self, client, provider, provider_profile, auth_headers
    ):
        response = await client.get(
            "/api/appointments/provider", params={"status": "Lost"}, headers=auth_headers(provider)
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid status"


class TestUpdateStatus:
    async def test_provider_confirms_then_completes(
        self,
        client,
        async_session,
        pet_owner,
        provider,
        provider_profile,
        appointment_factory,
        auth_headers,
    ):
        appointment = await appointment_factory.create(
            async_session, pet_owner, provider_profile, status=AppointmentStatus.REQUESTED
        )
        url = f"/api/appointments/{appointment.id}/status"
        headers = auth_headers(provider)

        confirmed = await client.put(url, json={"status": "Confirmed"}, headers=headers)
        assert confirmed.status_code == 200
        assert confirmed.json()["data"]["status"] == "Confirmed"

        completed = await client.put(url, json={"status": "Completed"}, headers=headers)
        assert completed.json()["data"]["status"] == "Completed"

        await async_session.refresh(appointment)
        assert appointment.status == AppointmentStatus.COMPLETED

    async def test_requested_cannot_jump_to_completed(
        self,
        client,
        async_session,
        pet_owner,
        provider,
        provider_profile,
        appointment_factory,
        auth_headers,
    ):
        appointment = await appointment_factory.create(
            async_session, pet_owner, provider_profile, status=AppointmentStatus.REQUESTED
        )

        response = await client.put(
            f"/api/appointments/{appointment.id}/status",
            json={"status": "Completed"},
            headers=auth_headers(provider),
        )

        assert response.status_code == 400
        assert response.json()["message"] == (
            "Cannot change appointment status from Requested to Completed"
        )

    async def test_cancelled_is_final(
        self,
        client,
        async_session,
        pet_owner,
        provider,
        provider_profile,
        appointment_factory,
        auth_headers,
    ):
        appointment = await appointment_factory.create(
            async_session, pet_owner, provider_profile, status=AppointmentStatus.CANCELLED
        )

        response = await client.put(
            f"/api/appointments/{appointment.id}/status",
            json={"status": "Confirmed"},
            headers=auth_headers(provider),
        )
        assert response.status_code == 400

    async def test_other_providers_appointment(
        self,
        client,
        async_session,
        pet_owner,
        provider_profile,
        user_factory,
        profile_factory,
        appointment_factory,
        auth_headers,
    ):
        appointment = await appointment_factory.create(
            async_session, pet_owner, provider_profile, status=AppointmentStatus.REQUESTED
        )
        intruder = await user_factory.create_provider(async_session)
        await profile_factory.create(async_session, intruder)

        response = await client.put(
            f"/api/appointments/{appointment.id}/status",
            json={"status": "Cancelled"},
            headers=auth_headers(intruder),
        )

        assert response.status_code == 403
        assert response.json()["message"] == "Not authorized to update this appointment"

    async def test_unknown_appointment(self, client, provider, provider_profile, auth_headers):
        response = await client.put(
            f"/api/appointments/{uuid.uuid4()}/status",
            json={"status": "Confirmed"},
            headers=auth_headers(provider),
        )

        assert response.status_code == 404
        assert response.json()["message"] == "Appointment not found"


class TestBookingToReview:
    async def test_completed_booking_can_be_reviewed(
        self, client, pet_owner, provider, provider_profile, bookable, auth_headers
    ):
        owner_headers = auth_headers(pet_owner)
        booked = await client.post(
            "/api/appointments", json=booking(provider_profile, bookable), headers=owner_headers
        )
        appointment_id = booked.json()["data"]["id"]

        for status in ("Confirmed", "Completed"):
            response = await client.put(
                f"/api/appointments/{appointment_id}/status",
                json={"status": status},
                headers=auth_headers(provider),
            )
            assert response.status_code == 200

        review = await client.post(
            "/api/reviews",
            json={"appointmentId": appointment_id, "rating": 5, "comment": "Lovely visit"},
            headers=owner_headers,
        )

        assert review.status_code == 201
        assert review.json()["data"]["appointmentId"] == appointment_id
