"""
API tests for the services listed on a provider profile.
"""

import uuid

from vetmarket.models import Service

SERVICE_PAYLOAD = {
    "name": "Home Vaccination",
    "description": "Core vaccines given at home",
    "estimatedDurationMinutes": 30,
    "price": 85.0,
    "animalType": "Small Animal",
    "customFields": [{"name": "Pet age", "type": "Number", "required": True}],
}


class TestCreateService:
    async def test_create(self, client, provider, provider_profile, auth_headers):
        response = await client.post(
            "/api/profiles/visiting-vet/services", json=SERVICE_PAYLOAD, headers=auth_headers(provider)
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["profileId"] == str(provider_profile.id)
        assert data["price"] == 85.0
        assert data["b2bPrice"] is None
        assert data["customFields"][0]["name"] == "Pet age"

    async def test_dual_pricing_drops_flat_price(
        self, client, async_session, provider, provider_profile, auth_headers
    ):
        payload = {**SERVICE_PAYLOAD, "hasDifferentPricing": True, "b2bPrice": 60, "b2cPrice": 90}

        response = await client.post(
            "/api/profiles/visiting-vet/services", json=payload, headers=auth_headers(provider)
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["price"] is None
        assert (data["b2bPrice"], data["b2cPrice"]) == (60.0, 90.0)

        stored = await async_session.get(Service, uuid.UUID(data["id"]))
        assert (stored.price, stored.b2b_price, stored.b2c_price) == (None, 60.0, 90.0)

    async def test_requires_profile(self, client, provider, auth_headers):
        response = await client.post(
            "/api/profiles/visiting-vet/services", json=SERVICE_PAYLOAD, headers=auth_headers(provider)
        )
        assert response.status_code == 404

    async def test_invalid_payload(self, client, provider, provider_profile, auth_headers):
        response = await client.post(
            "/api/profiles/visiting-vet/services",
            json={**SERVICE_PAYLOAD, "estimatedDurationMinutes": 0},
            headers=auth_headers(provider),
        )
        assert response.status_code == 400


class TestUpdateService:
    async def test_toggle_pricing_modes(
        self, client, async_session, provider, provider_profile, service_factory, auth_headers
    ):
        service = await service_factory.create(async_session, provider_profile)
        url = f"/api/profiles/visiting-vet/services/{service.id}"
        headers = auth_headers(provider)

        dual = await client.put(
            url,
            json={"hasDifferentPricing": True, "b2bPrice": 100, "b2cPrice": 140},
            headers=headers,
        )
        assert dual.status_code == 200
        assert dual.json()["data"]["price"] is None
        assert dual.json()["data"]["b2cPrice"] == 140.0

        flat = await client.put(url, json={"price": 130}, headers=headers)
        data = flat.json()["data"]
        assert data["hasDifferentPricing"] is False
        assert data["price"] == 130.0
        assert data["b2bPrice"] is None and data["b2cPrice"] is None

    async def test_switch_dual_pricing_off(
        self, client, async_session, provider, provider_profile, service_factory, auth_headers
    ):
        service = await service_factory.create(
            async_session,
            provider_profile,
            price=None,
            has_different_pricing=True,
            b2b_price=70.0,
            b2c_price=95.0,
        )

        response = await client.put(
            f"/api/profiles/visiting-vet/services/{service.id}",
            json={"hasDifferentPricing": False, "price": 80},
            headers=auth_headers(provider),
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["hasDifferentPricing"] is False
        assert data["price"] == 80.0
        assert data["b2bPrice"] is None and data["b2cPrice"] is None

        await async_session.refresh(service)
        assert (service.price, service.b2b_price, service.b2c_price) == (80.0, None, None)

    async def test_other_providers_service(
        self,
        client,
        async_session,
        provider_profile,
        user_factory,
        profile_factory,
        service_factory,
        auth_headers,
    ):
        service = await service_factory.create(async_session, provider_profile)
        intruder = await user_factory.create_provider(async_session)
        await profile_factory.create(async_session, intruder)

        response = await client.put(
            f"/api/profiles/visiting-vet/services/{service.id}",
            json={"name": "Hijacked"},
            headers=auth_headers(intruder),
        )

        assert response.status_code == 403
        assert response.json()["message"] == "Not authorized to update this service"

        await async_session.refresh(service)
        assert service.name == "Wellness Exam"

    async def test_unknown_service(self, client, provider, provider_profile, auth_headers):
        response = await client.put(
            f"/api/profiles/visiting-vet/services/{uuid.uuid4()}",
            json={"name": "x"},
            headers=auth_headers(provider),
        )

        assert response.status_code == 404
        assert response.json()["message"] == "Service not found"


class TestDeleteAndList:
    async def test_delete(
        self, client, async_session, provider, provider_profile, service_factory, auth_headers
    ):
        service = await service_factory.create(async_session, provider_profile)

        response = await client.delete(
            f"/api/profiles/visiting-vet/services/{service.id}", headers=auth_headers(provider)
        )

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Service deleted successfully"}
        async_session.expunge_all()
        assert await async_session.get(Service, service.id) is None

    async def test_public_list(self, client, async_session, provider_profile, service_factory):
        await service_factory.create(async_session, provider_profile, name="First")
        await service_factory.create(async_session, provider_profile, name="Second")

        response = await client.get(f"/api/profiles/visiting-vet/{provider_profile.id}/services")

        body = response.json()
        assert body["count"] == 2
        assert [s["name"] for s in body["data"]] == ["First", "Second"]

    async def test_list_unknown_profile(self, client):
        response = await client.get(f"/api/profiles/visiting-vet/{uuid.uuid4()}/services")
        assert response.status_code == 404

    async def test_list_malformed_profile_id(self, client):
        response = await client.get("/api/profiles/visiting-vet/not-a-profile/services")

        assert response.status_code == 404
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Profile not found"
