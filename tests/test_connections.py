"""Unit tests for the connection workflow and its endpoints."""

from __future__ import annotations

import threading
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from app.core.exceptions import DuplicateRequest, InvalidState, InvalidTarget, NotFound
from app.db.memory import InMemoryRepository
from app.db.repository import CofounderRepository, get_repository
from app.db.supabase_repository import SupabaseRepository
from app.models.enums import ConnectionDecision, ConnectionStatus
from app.services.connections import (
    create_request,
    list_accepted_connections,
    list_incoming,
    list_outgoing,
    respond,
)
from tests.factories import ALICE_ID, BOB_ID, CAROL_ID, DAVE_ID, make_profile


# ---------------------------------------------------------------------------
# create_request
# ---------------------------------------------------------------------------


class TestCreateRequest:
    def test_creates_pending_request_with_score(
        self, repository: InMemoryRepository
    ) -> None:
        request = create_request(repository, ALICE_ID, BOB_ID)

        assert request.requester_id == ALICE_ID
        assert request.target_id == BOB_ID
        assert request.status == ConnectionStatus.pending
        assert request.match_score == 80

    def test_duplicate_for_same_ordered_pair(
        self, repository: InMemoryRepository
    ) -> None:
        create_request(repository, ALICE_ID, BOB_ID)

        with pytest.raises(DuplicateRequest):
            create_request(repository, ALICE_ID, BOB_ID)

        assert len(repository.list_requests(requester_id=ALICE_ID, target_id=BOB_ID)) == 1

    def test_duplicate_even_after_decision(self, repository: InMemoryRepository) -> None:
        request = create_request(repository, ALICE_ID, BOB_ID)
        respond(repository, request.id, ConnectionDecision.rejected)

        with pytest.raises(DuplicateRequest):
            create_request(repository, ALICE_ID, BOB_ID)

    def test_reverse_direction_is_a_different_pair(
        self, repository: InMemoryRepository
    ) -> None:
        create_request(repository, ALICE_ID, BOB_ID)
        reverse = create_request(repository, BOB_ID, ALICE_ID)

        assert reverse.requester_id == BOB_ID

    def test_self_target_is_invalid(self, repository: InMemoryRepository) -> None:
        with pytest.raises(InvalidTarget):
            create_request(repository, ALICE_ID, ALICE_ID)
        assert repository.list_requests() == []

    def test_unknown_target(self, repository: InMemoryRepository) -> None:
        with pytest.raises(NotFound):
            create_request(repository, ALICE_ID, uuid4())

    def test_unknown_requester_has_no_score(
        self, repository: InMemoryRepository
    ) -> None:
        request = create_request(repository, uuid4(), BOB_ID)
        assert request.match_score is None

    def test_concurrent_duplicates_only_one_succeeds(
        self, repository: InMemoryRepository
    ) -> None:
        outcomes: list[str] = []
        barrier = threading.Barrier(8)

        def attempt() -> None:
            barrier.wait()
            try:
                create_request(repository, CAROL_ID, DAVE_ID)
                outcomes.append("created")
            except DuplicateRequest:
                outcomes.append("duplicate")

        threads = [threading.Thread(target=attempt) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert outcomes.count("created") == 1
        assert outcomes.count("duplicate") == 7


# ---------------------------------------------------------------------------
# respond
# ---------------------------------------------------------------------------


class TestRespond:
    def test_accept_updates_in_place(self, repository: InMemoryRepository) -> None:
        request = create_request(repository, ALICE_ID, BOB_ID)

        updated = respond(repository, request.id, ConnectionDecision.accepted)

        assert updated.id == request.id
        assert updated.status == ConnectionStatus.accepted
        assert len(repository.list_requests()) == 1

    def test_reject(self, repository: InMemoryRepository) -> None:
        request = create_request(repository, ALICE_ID, BOB_ID)
        updated = respond(repository, request.id, ConnectionDecision.rejected)
        assert updated.status == ConnectionStatus.rejected

    def test_second_response_is_invalid_state(
        self, repository: InMemoryRepository
    ) -> None:
        request = create_request(repository, ALICE_ID, BOB_ID)
        respond(repository, request.id, ConnectionDecision.accepted)

        with pytest.raises(InvalidState):
            respond(repository, request.id, ConnectionDecision.rejected)

        current = repository.get_request(request.id)
        assert current is not None
        assert current.status == ConnectionStatus.accepted

    def test_unknown_request(self, repository: InMemoryRepository) -> None:
        with pytest.raises(NotFound):
            respond(repository, uuid4(), ConnectionDecision.accepted)

    def test_concurrent_responses_only_one_succeeds(
        self, repository: InMemoryRepository
    ) -> None:
        request = create_request(repository, ALICE_ID, BOB_ID)
        outcomes: list[str] = []
        barrier = threading.Barrier(8)

        def attempt(decision: ConnectionDecision) -> None:
            barrier.wait()
            try:
                respond(repository, request.id, decision)
                outcomes.append(decision.value)
            except InvalidState:
                outcomes.append("invalid_state")

        decisions = [ConnectionDecision.accepted, ConnectionDecision.rejected] * 4
        threads = [threading.Thread(target=attempt, args=(d,)) for d in decisions]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert outcomes.count("invalid_state") == 7
        winner = next(o for o in outcomes if o != "invalid_state")
        current = repository.get_request(request.id)
        assert current is not None
        assert current.status.value == winner


# ---------------------------------------------------------------------------
# Listing
# ---------------------------------------------------------------------------


class TestListing:
    def test_incoming_and_outgoing_pending(
        self, repository: InMemoryRepository
    ) -> None:
        to_bob = create_request(repository, ALICE_ID, BOB_ID)
        from_dave = create_request(repository, DAVE_ID, ALICE_ID)
        answered = create_request(repository, CAROL_ID, ALICE_ID)
        respond(repository, answered.id, ConnectionDecision.rejected)

        incoming = list_incoming(repository, ALICE_ID)
        outgoing = list_outgoing(repository, ALICE_ID)

        assert [r.id for r in incoming] == [from_dave.id]
        assert incoming[0].counterpart.name == "Dave"
        assert [r.id for r in outgoing] == [to_bob.id]
        assert outgoing[0].counterpart.name == "Bob"

    def test_pending_with_missing_counterpart_is_skipped(
        self, repository: InMemoryRepository
    ) -> None:
        ghost = uuid4()
        create_request(repository, ghost, ALICE_ID)

        assert list_incoming(repository, ALICE_ID) == []

    def test_accepted_visible_from_both_sides(
        self, repository: InMemoryRepository
    ) -> None:
        request = create_request(repository, ALICE_ID, BOB_ID)
        respond(repository, request.id, ConnectionDecision.accepted)

        alice = list_accepted_connections(repository, ALICE_ID)
        bob = list_accepted_connections(repository, BOB_ID)

        assert [c.partner.id for c in alice] == [BOB_ID]
        assert [c.partner.id for c in bob] == [ALICE_ID]
        assert alice[0].id == request.id

    def test_accepted_deduplicated_by_partner(
        self, repository: InMemoryRepository
    ) -> None:
        forward = create_request(repository, ALICE_ID, BOB_ID)
        backward = create_request(repository, BOB_ID, ALICE_ID)
        respond(repository, forward.id, ConnectionDecision.accepted)
        respond(repository, backward.id, ConnectionDecision.accepted)

        alice = list_accepted_connections(repository, ALICE_ID)

        assert len(alice) == 1
        assert alice[0].id == forward.id

    def test_accepted_skips_deleted_partner(self) -> None:
        alice = make_profile("Alice", user_id=ALICE_ID)
        repo = InMemoryRepository([alice])
        request = create_request(repo, uuid4(), ALICE_ID)
        respond(repo, request.id, ConnectionDecision.accepted)

        assert list_accepted_connections(repo, ALICE_ID) == []

    def test_pending_and_rejected_are_not_connections(
        self, repository: InMemoryRepository
    ) -> None:
        create_request(repository, ALICE_ID, BOB_ID)
        rejected = create_request(repository, ALICE_ID, CAROL_ID)
        respond(repository, rejected.id, ConnectionDecision.rejected)

        assert list_accepted_connections(repository, ALICE_ID) == []


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


def _send(client: TestClient, requester: object, target: object):
    return client.post(
        "/api/matches",
        json={"userId": str(requester), "matchedUserId": str(target)},
    )


class TestConnectionEndpoints:
    def test_create_request(self, test_client: TestClient) -> None:
        response = _send(test_client, ALICE_ID, BOB_ID)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["match"]["status"] == "pending"
        assert body["match"]["requester_id"] == str(ALICE_ID)
        assert body["match"]["target_id"] == str(BOB_ID)

    def test_duplicate_request_returns_409(self, test_client: TestClient) -> None:
        _send(test_client, ALICE_ID, BOB_ID)
        response = _send(test_client, ALICE_ID, BOB_ID)

        assert response.status_code == 409
        body = response.json()
        assert body == {
            "success": False,
            "error": "DuplicateRequest",
            "message": "Request already sent!",
        }

    def test_self_request_returns_400(self, test_client: TestClient) -> None:
        response = _send(test_client, ALICE_ID, ALICE_ID)

        assert response.status_code == 400
        assert response.json()["error"] == "InvalidTarget"

    def test_respond_then_respond_again(self, test_client: TestClient) -> None:
        request_id = _send(test_client, ALICE_ID, BOB_ID).json()["match"]["id"]

        accepted = test_client.post(
            f"/api/matches/{request_id}/respond", json={"status": "accepted"}
        )
        again = test_client.post(
            f"/api/matches/{request_id}/respond", json={"status": "rejected"}
        )

        assert accepted.status_code == 200
        assert accepted.json()["request"]["status"] == "accepted"
        assert again.status_code == 409
        assert again.json()["error"] == "InvalidState"

    def test_respond_unknown_request_returns_404(self, test_client: TestClient) -> None:
        response = test_client.post(
            f"/api/matches/{uuid4()}/respond", json={"status": "accepted"}
        )
        assert response.status_code == 404
        assert response.json()["error"] == "NotFound"

    def test_respond_with_pending_is_rejected(self, test_client: TestClient) -> None:
        request_id = _send(test_client, ALICE_ID, BOB_ID).json()["match"]["id"]
        response = test_client.post(
            f"/api/matches/{request_id}/respond", json={"status": "pending"}
        )
        assert response.status_code == 422

    def test_requests_lists_received_and_sent(self, test_client: TestClient) -> None:
        _send(test_client, ALICE_ID, BOB_ID)
        _send(test_client, DAVE_ID, ALICE_ID)

        response = test_client.get(
            "/api/matches/requests", params={"userId": str(ALICE_ID)}
        )

        assert response.status_code == 200
        body = response.json()
        assert [r["counterpart"]["name"] for r in body["requests"]] == ["Dave"]
        assert [r["counterpart"]["name"] for r in body["sent"]] == ["Bob"]

    def test_connections_after_accept(self, test_client: TestClient) -> None:
        request_id = _send(test_client, ALICE_ID, BOB_ID).json()["match"]["id"]
        test_client.post(
            f"/api/matches/{request_id}/respond", json={"status": "accepted"}
        )

        for viewer, partner in ((ALICE_ID, "Bob"), (BOB_ID, "Alice")):
            response = test_client.get(
                "/api/connections", params={"userId": str(viewer)}
            )
            assert response.status_code == 200
            connections = response.json()["connections"]
            assert [c["partner"]["name"] for c in connections] == [partner]
            assert connections[0]["status"] == "accepted"

    def test_feed_shows_status_after_request(self, test_client: TestClient) -> None:
        _send(test_client, BOB_ID, ALICE_ID)

        response = test_client.get("/api/matches", params={"userId": str(ALICE_ID)})

        by_name = {m["name"]: m for m in response.json()["matches"]}
        assert by_name["Bob"]["connection_status"] == "pending"
        assert by_name["Dave"]["connection_status"] is None


# ---------------------------------------------------------------------------
# Weak profile references, both storage backends
# ---------------------------------------------------------------------------


def _chainable_table_mock(data: list) -> MagicMock:
    """Return a mock that supports fluent chaining."""
    m = MagicMock()
    for method in ("select", "insert", "update", "eq", "neq", "limit", "in_", "order"):
        getattr(m, method).return_value = m
    m.execute.return_value = MagicMock(data=data)
    return m


def _supabase_without_requester(requester_id: object) -> SupabaseRepository:
    """Supabase repository where only Bob's profile exists."""
    users = _chainable_table_mock([{"id": str(BOB_ID), "name": "Bob", "role": "Sales Lead"}])
    matches = _chainable_table_mock(
        [
            {
                "id": str(uuid4()),
                "user_id": str(requester_id),
                "matched_user_id": str(BOB_ID),
                "status": "pending",
                "match_score": None,
                "created_at": "2026-03-01T10:00:00+00:00",
            }
        ]
    )
    client = MagicMock()
    client.table.side_effect = lambda name: users if name == "users" else matches
    return SupabaseRepository(client)


class TestMissingRequesterProfile:
    """A request from a user without a profile is stored with no score."""

    @pytest.mark.parametrize("backend", ["memory", "supabase"])
    def test_create_request_from_missing_profile(
        self,
        backend: str,
        test_client: TestClient,
        repository: InMemoryRepository,
    ) -> None:
        from app.main import app

        ghost = uuid4()
        repo: CofounderRepository = (
            repository if backend == "memory" else _supabase_without_requester(ghost)
        )
        app.dependency_overrides[get_repository] = lambda: repo

        response = _send(test_client, ghost, BOB_ID)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["match"]["requester_id"] == str(ghost)
        assert body["match"]["match_score"] is None
        if isinstance(repo, SupabaseRepository):
            payload = repo._client.table("cofounder_matches").insert.call_args.args[0]
            assert payload["match_score"] is None
