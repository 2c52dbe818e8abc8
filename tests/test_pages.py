"""
HTML page tests: listing, login/signup forms, gallery, verify and bid forms
"""
from bidwell.models import AuctionStatus

from conftest import PASSWORD


def _login_form(client, email, password=PASSWORD, next_path=""):
    return client.post(
        "/login",
        data={"email": email, "password": password, "next": next_path},
        follow_redirects=False,
    )


VERIFY_FORM = {
    "name": "Jane Doe",
    "email": "jane@example.com",
    "card_number": "4242424242424242",
    "expiry": "1230",
    "cvc": "123",
    "agreed": "true",
}


class TestPublicPages:

    def test_index_lists_active_auctions(self, client, factory, live_auction):
        factory.auction(live_auction["org"].id, name="Secret Draft", status=AuctionStatus.DRAFT)

        response = client.get("/")

        assert response.status_code == 200
        assert "Spring Gala" in response.text
        assert "Secret Draft" not in response.text

    def test_gallery_shows_items_and_current_bid(self, client, factory, live_auction):
        item = live_auction["item"]
        factory.bid(item.id, factory.user().id, 125000)

        response = client.get(f"/auctions/{live_auction['auction'].id}")

        assert response.status_code == 200
        assert "Weekend Cabin Getaway" in response.text
        assert "$1,250" in response.text
        assert "Verify to bid" in response.text

    def test_unknown_auction_page(self, client):
        response = client.get("/auctions/missing")

        assert response.status_code == 404
        assert "Auction not found" in response.text

    def test_bid_modal_opens_from_query_string(self, client, factory, live_auction):
        item = live_auction["item"]

        response = client.get(f"/auctions/{live_auction['auction'].id}?bid={item.id}")

        assert 'id="bid-modal"' in response.text
        assert "Bid on Weekend Cabin Getaway" in response.text


class TestLoginForm:

    def test_login_redirects_to_next(self, client, factory, live_auction):
        factory.user(email="jane@example.com")
        gallery = f"/auctions/{live_auction['auction'].id}"

        response = _login_form(client, "jane@example.com", next_path=gallery)

        assert response.status_code == 303
        assert response.headers["location"] == gallery
        assert "auth-token=" in response.headers["set-cookie"]

    def test_admin_lands_on_dashboard(self, client, factory):
        org = factory.organization()
        factory.admin(org.id, email="admin@riverdale.org")

        response = _login_form(client, "admin@riverdale.org")

        assert response.headers["location"] == "/admin/auctions-dashboard"

    def test_offsite_next_is_ignored(self, client, factory):
        factory.user(email="jane@example.com")

        response = _login_form(client, "jane@example.com", next_path="//evil.example.com/")

        assert response.headers["location"] == "/"

    def test_backslash_next_is_ignored(self, client, factory):
        factory.user(email="jane@example.com")

        response = _login_form(client, "jane@example.com", next_path="/\\evil.example.com/")

        assert response.headers["location"] == "/"

    def test_bad_credentials_rerender_form(self, client, factory):
        factory.user(email="jane@example.com")

        response = _login_form(client, "jane@example.com", password="wrong")

        assert response.status_code == 401
        assert "Invalid email or password" in response.text
        assert 'value="jane@example.com"' in response.text

    def test_signup_form(self, client):
        response = client.post(
            "/signup",
            data={"email": "new@example.com", "password": "pw", "first_name": "New", "last_name": "Bidder"},
            follow_redirects=False,
        )

        assert response.status_code == 303
        assert client.get("/api/auth/me").json()["user"]["email"] == "new@example.com"

    def test_signup_form_missing_fields(self, client):
        response = client.post("/signup", data={"email": "new@example.com", "first_name": "New"})

        assert response.status_code == 400
        assert "All fields are required" in response.text

    def test_logout(self, client, factory):
        factory.user(email="jane@example.com")
        _login_form(client, "jane@example.com")

        response = client.post("/logout", follow_redirects=False)

        assert response.headers["location"] == "/login"
        assert client.get("/api/auth/me").status_code == 401


class TestGalleryForms:

    def _signed_in(self, client, factory):
        factory.user(email="jane@example.com")
        _login_form(client, "jane@example.com")

    def test_verify_then_bid(self, client, factory, live_auction):
        self._signed_in(client, factory)
        auction_id = live_auction["auction"].id
        item_id = live_auction["item"].id

        verified = client.post(f"/auctions/{auction_id}/verify", data=VERIFY_FORM)
        assert verified.status_code == 200
        assert "You&#39;re verified" in verified.text

        response = client.post(
            f"/auctions/{auction_id}/items/{item_id}/bid",
            data={"amount": "55"},
            follow_redirects=False,
        )
        assert response.status_code == 303
        page = client.get(response.headers["location"])
        assert "Bid placed! Your bid of $55 is now the highest" in page.text
        assert client.get(f"/api/items/{item_id}").json()["item"]["currentBid"] == 5500

    def test_invalid_verify_form_shows_field_errors(self, client, factory, live_auction):
        self._signed_in(client, factory)

        response = client.post(
            f"/auctions/{live_auction['auction'].id}/verify",
            data={**VERIFY_FORM, "cvc": "1", "agreed": "false"},
        )

        assert response.status_code == 400
        assert "CVC must be 3 or 4 digits" in response.text
        assert 'id="verify-modal"' in response.text

    def test_bid_without_login_goes_to_login(self, client, live_auction):
        auction_id = live_auction["auction"].id

        response = client.post(
            f"/auctions/{auction_id}/items/{live_auction['item'].id}/bid",
            data={"amount": "55"},
            follow_redirects=False,
        )

        assert response.headers["location"] == f"/login?next=%2Fauctions%2F{auction_id}"

    def test_bid_without_verification_opens_verify_form(self, client, factory, live_auction):
        self._signed_in(client, factory)
        auction_id = live_auction["auction"].id

        response = client.post(
            f"/auctions/{auction_id}/items/{live_auction['item'].id}/bid",
            data={"amount": "55"},
        )

        assert 'id="verify-modal"' in response.text
        assert "Verify to bid" in response.text

    def test_low_bid_reopens_bid_form_with_error(self, client, factory, live_auction):
        self._signed_in(client, factory)
        auction_id = live_auction["auction"].id
        item = live_auction["item"]
        factory.bid(item.id, factory.user().id, 5500)
        client.post(f"/auctions/{auction_id}/verify", data=VERIFY_FORM)

        response = client.post(f"/auctions/{auction_id}/items/{item.id}/bid", data={"amount": "52"})

        assert response.status_code == 200
        assert "Bid must be at least $55.01" in response.text
        assert 'id="bid-modal"' in response.text

    def test_oversized_bid_reopens_bid_form_with_error(self, client, factory, live_auction):
        self._signed_in(client, factory)
        auction_id = live_auction["auction"].id
        item = live_auction["item"]
        client.post(f"/auctions/{auction_id}/verify", data=VERIFY_FORM)

        response = client.post(f"/auctions/{auction_id}/items/{item.id}/bid", data={"amount": "1e30"})

        assert response.status_code == 200
        assert "Amounts are limited to $21,474,836.47" in response.text
        assert 'id="bid-modal"' in response.text

    def test_bid_modal_offers_quick_bids(self, client, factory, live_auction):
        self._signed_in(client, factory)
        auction_id = live_auction["auction"].id
        item = live_auction["item"]
        client.post(f"/auctions/{auction_id}/verify", data=VERIFY_FORM)

        response = client.get(f"/auctions/{auction_id}?bid={item.id}")

        # starting bid $50: minimum, +$25, +$50, +$100
        for amount in ("50.00", "75.00", "100.00", "150.00"):
            assert f'name="amount" value="{amount}"' in response.text
        assert "$150</button>" in response.text

    def test_quick_bid_is_placed(self, client, factory, live_auction):
        self._signed_in(client, factory)
        auction_id = live_auction["auction"].id
        item = live_auction["item"]
        client.post(f"/auctions/{auction_id}/verify", data=VERIFY_FORM)

        response = client.post(
            f"/auctions/{auction_id}/items/{item.id}/bid",
            data={"amount": "75.00"},
            follow_redirects=False,
        )

        assert response.status_code == 303
        gallery = client.get(response.headers["location"])
        assert "Your bid of $75 is now the highest" in gallery.text
