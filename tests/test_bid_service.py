"""
Bid acceptance tests

A bid is accepted when it is at least the starting bid (first bid) or at
least the current high bid plus the increment.
"""
import threading
from datetime import timedelta

import pytest

from bidwell.core.database import SessionLocal
from bidwell.models import AuctionStatus, Bid
from bidwell.services import BidService, CatalogService
from bidwell.services.errors import (
    AuctionClosedError,
    BidTooLowError,
    InvalidBidError,
    ItemNotFoundError,
    UserNotFoundError,
)


class TestPlaceBid:

    def test_first_bid_at_starting_bid(self, db, factory, live_auction):
        item = live_auction["item"]
        bidder = factory.user()

        bid = BidService.place_bid(db, item.id, bidder.id, 5000)

        assert bid.id
        assert bid.amount == 5000
        assert CatalogService.item_stats(db, item.id).current_bid == 5000

    def test_first_bid_below_starting_bid_rejected(self, db, factory, live_auction):
        item = live_auction["item"]
        bidder = factory.user()

        with pytest.raises(BidTooLowError) as exc_info:
            BidService.place_bid(db, item.id, bidder.id, 4999)

        assert exc_info.value.minimum == 5000
        assert exc_info.value.status_code == 409
        assert db.query(Bid).count() == 0

    def test_lower_bid_after_higher_bid_rejected(self, db, factory, live_auction):
        """5000 then 5500 accepted, 5200 rejected; current bid stays 5500"""
        item = live_auction["item"]
        alice, bob, carol = factory.user(), factory.user(), factory.user()

        BidService.place_bid(db, item.id, alice.id, 5000)
        BidService.place_bid(db, item.id, bob.id, 5500)
        with pytest.raises(BidTooLowError) as exc_info:
            BidService.place_bid(db, item.id, carol.id, 5200)

        assert exc_info.value.current_bid == 5500
        assert exc_info.value.minimum == 5501
        assert "$55.01" in exc_info.value.message

        stats = CatalogService.item_stats(db, item.id)
        assert stats.current_bid == 5500
        assert stats.bids_count == 2

    def test_equal_to_current_bid_rejected(self, db, factory, live_auction):
        item = live_auction["item"]
        alice, bob = factory.user(), factory.user()
        BidService.place_bid(db, item.id, alice.id, 6000)

        with pytest.raises(BidTooLowError):
            BidService.place_bid(db, item.id, bob.id, 6000)

    def test_increment_is_applied(self, db, factory, live_auction):
        item = live_auction["item"]
        alice, bob = factory.user(), factory.user()
        BidService.place_bid(db, item.id, alice.id, 5000, increment=100)

        with pytest.raises(BidTooLowError):
            BidService.place_bid(db, item.id, bob.id, 5099, increment=100)
        bid = BidService.place_bid(db, item.id, bob.id, 5100, increment=100)

        assert bid.amount == 5100

    @pytest.mark.parametrize("amount", [0, -100, None, "5000", 50.5, True, 2**31, 10**19])
    def test_invalid_amounts(self, db, factory, live_auction, amount):
        bidder = factory.user()

        with pytest.raises(InvalidBidError):
            BidService.place_bid(db, live_auction["item"].id, bidder.id, amount)

    def test_unknown_item(self, db, factory):
        bidder = factory.user()

        with pytest.raises(ItemNotFoundError):
            BidService.place_bid(db, "missing", bidder.id, 5000)

    def test_unknown_user(self, db, live_auction):
        with pytest.raises(UserNotFoundError):
            BidService.place_bid(db, live_auction["item"].id, "missing", 5000)


class TestClosedAuctions:

    @pytest.mark.parametrize("status", [AuctionStatus.DRAFT, AuctionStatus.COMPLETED])
    def test_inactive_auction_rejects_bids(self, db, factory, status):
        org = factory.organization()
        auction = factory.auction(org.id, status=status)
        item = factory.item(auction.id)
        bidder = factory.user()

        with pytest.raises(AuctionClosedError):
            BidService.place_bid(db, item.id, bidder.id, 5000)

    def test_expired_auction_rejects_bids(self, db, factory):
        org = factory.organization()
        auction = factory.auction(org.id, ends_in=timedelta(seconds=-1))
        item = factory.item(auction.id)
        bidder = factory.user()

        with pytest.raises(AuctionClosedError) as exc_info:
            BidService.place_bid(db, item.id, bidder.id, 5000)

        assert "ended" in exc_info.value.message


class TestConcurrentBids:

    def _bid_in_thread(self, item_id, user_id, amount, barrier, results):
        barrier.wait()
        with SessionLocal() as session:
            try:
                BidService.place_bid(session, item_id, user_id, amount)
                results.append(("accepted", amount))
            except BidTooLowError:
                results.append(("rejected", amount))

    def test_equal_concurrent_bids_only_one_wins(self, db, factory, live_auction):
        item = live_auction["item"]
        bidders = [factory.user() for _ in range(5)]
        barrier = threading.Barrier(len(bidders))
        results = []

        threads = [
            threading.Thread(target=self._bid_in_thread, args=(item.id, b.id, 6000, barrier, results))
            for b in bidders
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        accepted = [r for r in results if r[0] == "accepted"]
        assert len(results) == 5
        assert len(accepted) == 1

        stats = CatalogService.item_stats(db, item.id)
        assert stats.current_bid == 6000
        assert stats.bids_count == 1

    def test_increasing_concurrent_bids_never_go_down(self, db, factory, live_auction):
        item = live_auction["item"]
        amounts = [5000, 5200, 5100, 5400, 5300, 5600]
        bidders = [factory.user() for _ in amounts]
        barrier = threading.Barrier(len(amounts))
        results = []

        threads = [
            threading.Thread(target=self._bid_in_thread, args=(item.id, b.id, amount, barrier, results))
            for b, amount in zip(bidders, amounts)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        accepted = [amount for outcome, amount in results if outcome == "accepted"]
        stored = [
            bid.amount
            for bid in db.query(Bid).filter(Bid.item_id == item.id).order_by(Bid.created_at, Bid.id)
        ]

        assert sorted(accepted) == sorted(stored)
        assert max(stored) == max(accepted)
        assert 5600 in accepted
