"""
Catalog, deposit verification and bidding API tests
"""
from bidwell.models import AuctionStatus

from conftest import VALID_DEPOSIT, login, verify


class TestCatalogRoutes:

    def test_list_only_active_auctions(self, client, factory, live_auction):
        org = live_auction["org"]
        factory.auction(org.id, name="Draft", status=AuctionStatus.DRAFT)

        response = client.get("/api/auctions")

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        auction = data["auctions"][0]
        assert auction["name"] == "Spring Gala"
        assert auction["organization"] == "Riverdale Community Foundation"
        assert auction["isLive"] is True
        assert auction["timeRemaining"].endswith("left")

    def test_auction_detail_has_item_projection(self, client, factory, live_auction):
        item = live_auction["item"]
        factory.bid(item.id, factory.user().id, 6500)

        response = client.get(f"/api/auctions/{live_auction['auction'].id}")

        assert response.status_code == 200
        items = response.json()["items"]
        assert len(items) == 1
        assert items[0]["currentBid"] == 6500
        assert items[0]["bidsCount"] == 1
        assert items[0]["minimumBid"] == 6501

    def test_draft_auction_is_not_public(self, client, factory):
        org = factory.organization()
        draft = factory.auction(org.id, status=AuctionStatus.DRAFT)

        assert client.get(f"/api/auctions/{draft.id}").status_code == 404

    def test_unknown_item(self, client):
        response = client.get("/api/items/missing")

        assert response.status_code == 404
        assert response.json()["success"] is False

    def test_item_top_bid(self, client, factory, live_auction):
        item = live_auction["item"]
        bidder = factory.user()
        factory.bid(item.id, bidder.id, 5000)
        factory.bid(item.id, bidder.id, 6200)

        data = client.get(f"/api/items/{item.id}").json()

        assert data["item"]["currentBid"] == 6200
        assert data["topBid"]["amount"] == 6200
        assert data["topBid"]["user_id"] == bidder.id

    def test_item_without_bids_has_no_top_bid(self, client, live_auction):
        assert client.get(f"/api/items/{live_auction['item'].id}").json()["topBid"] is None

    def test_item_bid_history(self, client, factory, live_auction):
        item = live_auction["item"]
        bidder = factory.user(first_name="Sam", last_name="Okafor")
        factory.bid(item.id, bidder.id, 5000)

        response = client.get(f"/api/items/{item.id}/bids")

        assert response.status_code == 200
        data = response.json()
        assert data["currentBid"] == 5000
        assert data["bids"][0]["bidderName"] == "Sam O."


class TestDepositVerification:

    def test_valid_deposit_sets_cookie(self, client, live_auction):
        response = client.post(f"/api/auctions/{live_auction['auction'].id}/verify", json=VALID_DEPOSIT)

        assert response.status_code == 200
        data = response.json()
        assert data["verified"] is True
        assert data["cardLast4"] == "4242"
        assert "bidder-verification=" in response.headers["set-cookie"]

    def test_invalid_deposit_lists_fields(self, client, live_auction):
        body = {**VALID_DEPOSIT, "cardNumber": "4242", "expiry": "13/30", "agreed": False}

        response = client.post(f"/api/auctions/{live_auction['auction'].id}/verify", json=body)

        assert response.status_code == 400
        fields = response.json()["fields"]
        assert set(fields) == {"cardNumber", "expiry", "agreed"}

    def test_unknown_auction(self, client):
        assert client.post("/api/auctions/missing/verify", json=VALID_DEPOSIT).status_code == 404


class TestPlaceBidRoute:

    def _bidder(self, client, factory, auction_id, email="bidder@example.com"):
        factory.user(email=email)
        login(client, email)
        verify(client, auction_id)

    def test_requires_login(self, client, live_auction):
        response = client.post(f"/api/items/{live_auction['item'].id}/bids", json={"amount": 5000})

        assert response.status_code == 401

    def test_requires_verification(self, client, factory, live_auction):
        factory.user(email="bidder@example.com")
        login(client, "bidder@example.com")

        response = client.post(f"/api/items/{live_auction['item'].id}/bids", json={"amount": 5000})

        assert response.status_code == 403
        assert response.json()["error"] == "Verify to bid"

    def test_verification_is_per_auction(self, client, factory, live_auction):
        other_auction = factory.auction(live_auction["org"].id, name="Other")
        self._bidder(client, factory, other_auction.id)

        response = client.post(f"/api/items/{live_auction['item'].id}/bids", json={"amount": 5000})

        assert response.status_code == 403

    def test_bid_accepted(self, client, factory, live_auction):
        self._bidder(client, factory, live_auction["auction"].id)

        response = client.post(f"/api/items/{live_auction['item'].id}/bids", json={"amount": 5000})

        assert response.status_code == 201
        data = response.json()
        assert data["success"] is True
        assert data["bid"]["amount"] == 5000
        assert data["currentBid"] == 5000
        assert data["bidsCount"] == 1
        assert data["minimumBid"] == 5001

    def test_low_bid_conflict(self, client, factory, live_auction):
        item = live_auction["item"]
        factory.bid(item.id, factory.user().id, 5500)
        self._bidder(client, factory, live_auction["auction"].id)

        response = client.post(f"/api/items/{item.id}/bids", json={"amount": 5200})

        assert response.status_code == 409
        data = response.json()
        assert data["success"] is False
        assert data["currentBid"] == 5500
        assert data["minimumBid"] == 5501
        assert client.get(f"/api/items/{item.id}").json()["item"]["bidsCount"] == 1

    def test_non_integer_amount(self, client, factory, live_auction):
        self._bidder(client, factory, live_auction["auction"].id)

        response = client.post(f"/api/items/{live_auction['item'].id}/bids", json={"amount": 50.5})

        assert response.status_code == 400

    def test_amount_above_column_range(self, client, factory, live_auction):
        self._bidder(client, factory, live_auction["auction"].id)
        item_id = live_auction["item"].id

        for amount in (2**31, 10**19):
            response = client.post(f"/api/items/{item_id}/bids", json={"amount": amount})

            assert response.status_code == 400
            assert response.json()["success"] is False
        assert client.get(f"/api/items/{item_id}").json()["item"]["bidsCount"] == 0

    def test_completed_auction(self, client, factory, live_auction):
        completed = factory.auction(live_auction["org"].id, name="Closed", status=AuctionStatus.COMPLETED)
        item = factory.item(completed.id)
        self._bidder(client, factory, completed.id)

        response = client.post(f"/api/items/{item.id}/bids", json={"amount": 5000})

        assert response.status_code == 409
        assert "not accepting bids" in response.json()["error"]
