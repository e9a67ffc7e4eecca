import unittest
from perudo.core.bid import Bid
from perudo.core.validator import ReasonKind, validate_bid, suggest_minimum_bids


def bid(quantity, value, player_id="player-0"):
    return Bid(player_id, quantity, value)


class TestBaseChecks(unittest.TestCase):
    def test_first_bid_is_valid(self):
        result = validate_bid(bid(1, 2), None, False, 25)
        self.assertTrue(result.valid)
        self.assertIsNone(result.reason)
        self.assertTrue(result)

    def test_insufficient_dice(self):
        result = validate_bid(bid(30, 3), None, False, 25)
        self.assertFalse(result)
        self.assertEqual(result.reason, ReasonKind.INSUFFICIENT_DICE_IN_PLAY)

    def test_quantity_below_one(self):
        self.assertEqual(validate_bid(bid(0, 3), None, False, 25).reason, ReasonKind.INVALID_BID_QUANTITY)

    def test_value_out_of_range(self):
        self.assertEqual(validate_bid(bid(2, 0), None, False, 25).reason, ReasonKind.INVALID_BID_VALUE)
        self.assertEqual(validate_bid(bid(2, 7), None, False, 25).reason, ReasonKind.INVALID_BID_VALUE)

    def test_first_failure_wins(self):
        # bad quantity and bad value: quantity is checked first
        self.assertEqual(validate_bid(bid(0, 9), None, False, 25).reason, ReasonKind.INVALID_BID_QUANTITY)
        # bad value and too many dice: value is checked before the dice bound
        self.assertEqual(validate_bid(bid(40, 9), None, False, 25).reason, ReasonKind.INVALID_BID_VALUE)

    def test_base_checks_apply_after_first_bid(self):
        result = validate_bid(bid(26, 4), bid(3, 4), False, 25)
        self.assertEqual(result.reason, ReasonKind.INSUFFICIENT_DICE_IN_PLAY)


class TestOrdering(unittest.TestCase):
    def test_normal_increase_by_value(self):
        prev = bid(3, 4)
        self.assertTrue(validate_bid(bid(3, 5), prev, False, 25))
        result = validate_bid(bid(3, 3), prev, False, 25)
        self.assertFalse(result)
        self.assertEqual(result.reason, ReasonKind.BID_NOT_INCREASING)

    def test_normal_increase_by_quantity_any_value(self):
        self.assertTrue(validate_bid(bid(4, 2), bid(3, 6), False, 25))
        self.assertFalse(validate_bid(bid(3, 4), bid(3, 4), False, 25))

    def test_ace_crossover(self):
        prev = bid(5, 3)
        self.assertTrue(validate_bid(bid(3, 1), prev, False, 25))
        self.assertEqual(validate_bid(bid(2, 1), prev, False, 25).reason, ReasonKind.BID_NOT_INCREASING)

    def test_leaving_aces(self):
        prev = bid(3, 1)
        self.assertTrue(validate_bid(bid(7, 2), prev, False, 25))
        self.assertFalse(validate_bid(bid(6, 6), prev, False, 25))

    def test_ace_to_ace(self):
        self.assertTrue(validate_bid(bid(4, 1), bid(3, 1), False, 25))
        self.assertFalse(validate_bid(bid(3, 1), bid(3, 1), False, 25))

    def test_timestamps_not_compared(self):
        early = bid(3, 4)
        late = bid(3, 4)
        self.assertFalse(validate_bid(early, late, False, 25))


class TestPalifico(unittest.TestCase):
    def test_value_locked(self):
        result = validate_bid(bid(9, 5), bid(2, 4), True, 25)
        self.assertEqual(result.reason, ReasonKind.PALIFICO_VALUE_LOCKED)

    def test_same_value_needs_more_dice(self):
        self.assertTrue(validate_bid(bid(3, 4), bid(2, 4), True, 25))
        self.assertEqual(validate_bid(bid(2, 4), bid(2, 4), True, 25).reason, ReasonKind.BID_NOT_INCREASING)

    def test_first_bid_free_in_palifico(self):
        self.assertTrue(validate_bid(bid(1, 1), None, True, 5))

    def test_aces_locked_too(self):
        self.assertTrue(validate_bid(bid(2, 1), bid(1, 1), True, 5))
        self.assertFalse(validate_bid(bid(3, 2), bid(1, 1), True, 5))


class TestSuggestions(unittest.TestCase):
    def test_opening_suggestion(self):
        self.assertEqual(suggest_minimum_bids(None, False), [(1, 2)])

    def test_after_normal_bid(self):
        self.assertEqual(suggest_minimum_bids(bid(5, 3), False), [(5, 4), (6, 3), (3, 1)])

    def test_after_sixes_no_value_bump(self):
        self.assertEqual(suggest_minimum_bids(bid(4, 6), False), [(5, 6), (2, 1)])

    def test_after_ace_bid(self):
        self.assertEqual(suggest_minimum_bids(bid(3, 1), False), [(4, 1), (7, 2)])

    def test_palifico(self):
        self.assertEqual(suggest_minimum_bids(bid(2, 4), True), [(3, 4)])

    def test_suggestions_are_legal(self):
        for prev in (bid(1, 2), bid(5, 3), bid(4, 6), bid(3, 1), bid(1, 1)):
            for q, v in suggest_minimum_bids(prev, False):
                self.assertTrue(validate_bid(bid(q, v), prev, False, 100), (prev, q, v))


class TestChainCanContinue(unittest.TestCase):
    """
    Starting from (1, 2) and always taking the first legal suggestion, bidding can go on
    until the quantity reaches the dice in play.
    """

    def test_chain_reaches_total(self):
        total = 25
        prev = bid(1, 2)
        steps = 0
        while prev.quantity < total:
            legal = [
                (q, v) for q, v in suggest_minimum_bids(prev, False)
                if validate_bid(bid(q, v), prev, False, total)
            ]
            self.assertTrue(legal, prev)
            q, v = legal[0]
            prev = bid(q, v)
            steps += 1
            self.assertLess(steps, 1000)
        self.assertEqual(prev.quantity, total)


if __name__ == '__main__':
    unittest.main()
