import unittest

from perudo.core.actions import Action, BidAction, CallCalzaAction, CallDudoAction
from perudo.core.engine import GameEngine, IllegalMoveError, NoActiveBidError
from perudo.core.session import GameSession, NoGameError, PhaseError
from perudo.core.state import GamePhase
from perudo.core.validator import ReasonKind
from perudo.persistence.recorder import InMemoryRecorder


class FixedRng:
    def __init__(self, face):
        self.face = face

    def randint(self, a, b):
        return self.face


def make_session(recorder=None):
    # every die shows 2, so a bid of all dice on twos is always exactly true
    return GameSession(GameEngine(rng=FixedRng(2)), recorder=recorder)


class TestNoGame(unittest.TestCase):
    def test_projections_empty(self):
        session = make_session()
        self.assertFalse(session.is_game_active)
        self.assertIsNone(session.state)
        self.assertIsNone(session.current_player)
        self.assertEqual(session.active_players, [])
        self.assertIsNone(session.current_bid)
        self.assertIsNone(session.phase)
        self.assertIsNone(session.last_round_result)
        self.assertFalse(session.is_palifico)
        self.assertEqual(session.total_dice_count, 0)
        self.assertIsNone(session.winner)

    def test_actions_need_a_game(self):
        session = make_session()
        with self.assertRaises(NoGameError):
            session.place_bid(1, 2)
        with self.assertRaises(NoGameError):
            session.call_dudo()
        with self.assertRaises(NoGameError):
            session.continue_to_next_round()

    def test_validate_without_game(self):
        result = make_session().validate_bid(1, 2)
        self.assertFalse(result)
        self.assertEqual(result.reason, ReasonKind.NO_ACTIVE_GAME)


class TestPhaseGating(unittest.TestCase):
    def setUp(self):
        self.session = make_session()
        self.session.start_game(["Ana", "Ben"])

    def test_started(self):
        self.assertIs(self.session.phase, GamePhase.BIDDING)
        self.assertEqual(self.session.total_dice_count, 10)
        self.assertEqual(self.session.current_player.name, "Ana")
        self.assertEqual(self.session.suggest_bids(), [(1, 2)])

    def test_challenge_without_bid_is_engine_error(self):
        with self.assertRaises(NoActiveBidError):
            self.session.call_dudo()

    def test_continue_needs_resolved_round(self):
        with self.assertRaises(PhaseError):
            self.session.continue_to_next_round()

    def test_no_bidding_after_challenge(self):
        self.session.place_bid(10, 2)
        self.session.call_dudo()
        self.assertIs(self.session.phase, GamePhase.DUDO_CHALLENGE)
        with self.assertRaises(PhaseError):
            self.session.place_bid(10, 3)
        with self.assertRaises(PhaseError):
            self.session.call_calza()
        self.assertIsInstance(PhaseError("x"), IllegalMoveError)

    def test_continue_starts_next_round(self):
        self.session.place_bid(10, 2)
        self.session.call_dudo()
        result = self.session.last_round_result
        self.assertEqual(result.loser_player_id, "player-1")
        state = self.session.continue_to_next_round()
        self.assertIs(state.phase, GamePhase.BIDDING)
        self.assertEqual(state.round_number, 2)
        self.assertEqual(self.session.current_player.id, "player-1")
        self.assertIsNone(self.session.last_round_result)
        self.assertEqual(self.session.total_dice_count, 9)


class TestActionsAndHistory(unittest.TestCase):
    def test_apply_action_dispatch(self):
        session = make_session()
        session.start_game(["Ana", "Ben"])
        session.apply_action(BidAction(10, 2))
        self.assertEqual(session.current_bid.quantity, 10)
        session.apply_action(CallCalzaAction())
        self.assertTrue(session.last_round_result.is_calza)
        self.assertEqual(session.last_round_result.winner_player_id, "player-0")
        with self.assertRaises(IllegalMoveError):
            session.apply_action(Action())

    def test_apply_dudo_action(self):
        session = make_session()
        session.start_game(["Ana", "Ben"])
        session.apply_action(BidAction(3, 2))
        session.apply_action(CallDudoAction())
        self.assertFalse(session.last_round_result.was_correct)

    def test_undo_restores_previous_snapshot(self):
        session = make_session()
        start = session.start_game(["Ana", "Ben"])
        session.place_bid(2, 2)
        self.assertIs(session.undo(), start)
        self.assertIsNone(session.current_bid)
        with self.assertRaises(IllegalMoveError):
            session.undo()

    def test_undo_drops_matching_turn_log_entry(self):
        session = make_session()
        session.start_game(["Ana", "Ben"])
        session.place_bid(2, 2)
        session.undo()
        self.assertEqual(len(session.turn_log), 1)
        self.assertEqual(len(session.turn_log), len(session.history))
        self.assertIsNone(session.turn_log[-1]["state"]["current_bid"])

    def test_history_keeps_every_snapshot(self):
        session = make_session()
        session.start_game(["Ana", "Ben"])
        session.place_bid(2, 2)
        session.place_bid(3, 2)
        self.assertEqual(len(session.history), 3)
        self.assertIsNone(session.history[0].current_bid)
        self.assertEqual(session.history[1].current_bid.quantity, 2)

    def test_reset(self):
        session = make_session()
        session.start_game(["Ana", "Ben"])
        session.reset_game()
        self.assertIsNone(session.state)
        self.assertEqual(session.history, ())
        self.assertEqual(session.get_events(), [])
        self.assertEqual(session.turn_log, [])

    def test_new_game_starts_with_fresh_events(self):
        session = make_session()
        session.start_game(["Ana", "Ben"])
        session.place_bid(2, 2)
        session.reset_game()
        session.start_game(["Caro", "Dan"])
        self.assertEqual([e["type"] for e in session.pop_events()], ["GameStarted", "RoundStarted"])

    def test_restart_without_reset_drops_old_events(self):
        session = make_session()
        session.start_game(["Ana", "Ben"])
        session.place_bid(2, 2)
        session.start_game(["Caro", "Dan"])
        self.assertEqual([e["type"] for e in session.get_events()], ["GameStarted", "RoundStarted"])


class TestEventsAndTurnLog(unittest.TestCase):
    def test_events_emitted(self):
        session = make_session()
        session.start_game(["Ana", "Ben"])
        session.place_bid(10, 2)
        session.call_dudo()
        types = [e["type"] for e in session.pop_events()]
        self.assertEqual(types, ["GameStarted", "RoundStarted", "BidPlaced", "DudoCalled", "DiceRevealed", "RoundResolved"])
        self.assertEqual(session.get_events(), [])

    def test_turn_log_snapshots(self):
        session = make_session()
        session.start_game(["Ana", "Ben"])
        session.place_bid(10, 2)
        self.assertEqual(len(session.turn_log), 2)
        self.assertIsNone(session.turn_log[0]["actor"])
        last = session.turn_log[-1]
        self.assertEqual(last["actor"], "player-0")
        self.assertEqual(last["action"]["type"], "Bid")
        self.assertEqual(last["state"]["phase"], "BIDDING")
        self.assertEqual(last["state"]["current_bid"]["quantity"], 10)

    def test_recorder_receives_events(self):
        recorder = InMemoryRecorder()
        session = make_session(recorder)
        state = session.start_game(["Ana", "Ben"])
        session.place_bid(4, 2)
        events = recorder.events()
        self.assertEqual(events[-1].event_type, "BidPlaced")
        self.assertEqual(events[-1].player_id, "player-0")
        self.assertEqual(events[-1].payload, {"quantity": 4, "value": 2})
        self.assertTrue(all(e.game_id == state.id for e in events))


class TestFullGame(unittest.TestCase):
    def test_play_until_game_over(self):
        session = make_session()
        session.start_game(["Ana", "Ben", "Caro"])
        steps = 0
        while session.phase is not GamePhase.GAME_OVER:
            if session.phase is GamePhase.BIDDING:
                if session.current_bid is None:
                    session.place_bid(session.total_dice_count, 2)
                else:
                    session.call_dudo()
            else:
                session.continue_to_next_round()
            steps += 1
            self.assertLess(steps, 500)
        self.assertIsNotNone(session.winner)
        self.assertEqual(len(session.active_players), 1)
        self.assertEqual(session.pop_events()[-1]["type"], "GameOver")
        with self.assertRaises(PhaseError):
            session.place_bid(1, 2)
        with self.assertRaises(PhaseError):
            session.continue_to_next_round()


if __name__ == '__main__':
    unittest.main()
