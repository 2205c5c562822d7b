import time
import unittest

import numpy as np

from connect import is_connected
from hex_board import HexBoard, BLACK, WHITE
from rollout_bot import RolloutBot, Decision, play_out, rollout_batch, PLACE, SWAP


def board_from_rows(rows):
    b = HexBoard(len(rows))
    for r, row in enumerate(rows):
        for c, ch in enumerate(row):
            b.set_tag_at(r, c, '.xo'.index(ch))
    return b


# o wins at once on (1,2), and loses everywhere else
ONE_GOOD_MOVE = ['xoxx',
                 'oo.o',
                 'xx.x',
                 'xoox']


class TestRollouts(unittest.TestCase):
    def test_play_out_leaves_board(self):
        b = HexBoard(3)
        rng = np.random.default_rng(0)
        play_out(b, 4, WHITE, [c for c in range(9) if c != 4], rng)
        self.assertEqual(b.empty_cells(), list(range(9)))

    def test_take_over(self):
        b = board_from_rows(['xxx',
                             'o.o',
                             'xxx'])
        self.assertTrue(play_out(b, 4, WHITE, [], np.random.default_rng(0)))
        self.assertFalse(play_out(b, 4, WHITE, [], np.random.default_rng(0), take_over_chance=1.0))
        self.assertEqual(rollout_batch(b, 4, WHITE, [], 400, seed=3), (400, 400))
        self.assertEqual(rollout_batch(b, 4, WHITE, [], 400, seed=3, take_over_chance=1.0), (0, 400))
        wins, _ = rollout_batch(b, 4, WHITE, [], 400, seed=3, take_over_chance=0.5)
        self.assertTrue(150 < wins < 250)

    def test_take_over_lowers_ratio(self):
        b = HexBoard(3)
        others = [c for c in range(9) if c != 4]
        never, half, always = (rollout_batch(b, 4, WHITE, others, 400, seed=1, take_over_chance=p)[0]
                               for p in (0.0, 0.5, 1.0))
        self.assertGreater(never, half)
        self.assertGreater(half, always)

    def test_batch(self):
        b = board_from_rows(ONE_GOOD_MOVE)
        self.assertEqual(rollout_batch(b, 6, WHITE, [10], 7, seed=1), (7, 7))
        self.assertEqual(rollout_batch(b, 10, WHITE, [6], 7, seed=1), (0, 7))
        self.assertEqual(rollout_batch(b, 6, WHITE, [10], 7, seed=1, deadline=time.time() - 1), (0, 0))

    def test_batch_is_seeded(self):
        b = HexBoard(4)
        others = list(range(1, 16))
        a = rollout_batch(b, 0, WHITE, others, 40, seed=5)
        self.assertEqual(a, rollout_batch(b, 0, WHITE, others, 40, seed=5))
        self.assertEqual(a[1], 40)


class TestRolloutBot(unittest.TestCase):
    def test_one_good_move(self):
        b = board_from_rows(ONE_GOOD_MOVE)
        for n in (1, 5, 50):
            d = RolloutBot(rollouts=n, seed=2).choose_move(b)
            self.assertEqual(d, Decision(PLACE, 6, 1.0, {6: 1.0, 10: 0.0}))
        self.assertEqual(b.empty_cells(), [6, 10])
        self.assertEqual(RolloutBot(rollouts=3, seed=2).win_ratio(b, 6), 1.0)

    def test_already_won(self):
        b = board_from_rows(['...',
                             'ooo',
                             '...'])
        d = RolloutBot(rollouts=4, seed=0).choose_move(b)
        self.assertEqual(d.point, 0)
        self.assertEqual(d.ratio, 1.0)
        self.assertEqual(set(d.ratios.values()), {1.0})

    def test_already_lost(self):
        b = board_from_rows(['.x.',
                             '.x.',
                             '.x.'])
        d = RolloutBot(rollouts=4, seed=0).choose_move(b)
        self.assertEqual((d.kind, d.point, d.ratio), (PLACE, 0, 0.0))
        self.assertEqual(sorted(d.ratios), [0, 2, 3, 5, 6, 8])

    def test_same_seed_same_move(self):
        b = board_from_rows(['x..',
                             '.o.',
                             '..x'])
        one = RolloutBot(rollouts=30, seed=9).choose_move(b)
        self.assertEqual(one, RolloutBot(rollouts=30, seed=9).choose_move(b))
        self.assertEqual(one, RolloutBot(rollouts=30, seed=9, workers=2).choose_move(b))

    def test_bot_can_play_black(self):
        b = board_from_rows(['ox.',
                             'oxo',
                             'o.o'])
        d = RolloutBot(rollouts=5, player=BLACK, seed=1).choose_move(b)
        self.assertEqual(d, Decision(PLACE, 7, 1.0, {2: 0.0, 7: 1.0}))

    def test_swap_candidate(self):
        b = HexBoard(3)
        b.set_tag(4, BLACK)
        bot = RolloutBot(rollouts=10, seed=1)
        d = bot.choose_move(b, swap_rule=True, move_number=2)
        self.assertIn(SWAP, d.ratios)
        self.assertEqual(len(d.ratios), 9)
        self.assertEqual(d.ratio, max(d.ratios.values()))
        self.assertNotIn(SWAP, bot.choose_move(b).ratios)
        self.assertNotIn(SWAP, bot.choose_move(b, swap_rule=True, move_number=3).ratios)
        self.assertEqual(b.get_tag(4), BLACK)

    def test_swap_center(self):
        b = HexBoard(3)
        b.set_tag(4, BLACK)
        d = RolloutBot(rollouts=300, seed=1).choose_move(b, swap_rule=True, move_number=2)
        self.assertEqual((d.kind, d.point), (SWAP, 4))
        self.assertGreater(d.ratio, max(r for k, r in d.ratios.items() if k != SWAP))

    def test_only_swap_wins(self):
        # x is already through, taking the centre is o's only way across
        b = board_from_rows(['x.x',
                             'oxo',
                             'x.x'])
        d = RolloutBot(rollouts=5, seed=1).choose_move(b, swap_rule=True, move_number=2, first_move=4)
        self.assertEqual(d, Decision(SWAP, 4, 1.0, {1: 0.0, 7: 0.0, SWAP: 1.0}))

    def test_swap_tie_keeps_cell(self):
        b = board_from_rows(['x..',
                             'ooo',
                             '...'])
        d = RolloutBot(rollouts=5, seed=1).choose_move(b, swap_rule=True, move_number=2)
        self.assertEqual(d.ratios[SWAP], 1.0)
        self.assertEqual((d.kind, d.point, d.ratio), (PLACE, 1, 1.0))

    def test_swap_candidate_needs_a_first_move(self):
        b = HexBoard(3)
        bot = RolloutBot(rollouts=2, seed=1)
        cands = bot.candidates(b, True, 2, None)
        self.assertEqual([c[0] for c in cands], list(range(9)))
        b.set_tag(0, BLACK)
        cands = bot.candidates(b, True, 2, None)
        self.assertEqual(cands[-1][:2], (SWAP, 0))

    def test_first_move_with_swap(self):
        b = HexBoard(3)
        d = RolloutBot(rollouts=10, seed=4).choose_move(b, swap_rule=True, move_number=1)
        self.assertEqual(d.kind, PLACE)
        self.assertTrue(0.0 <= d.ratio <= 1.0)
        self.assertEqual(len(d.ratios), 9)
        self.assertEqual(b.empty_cells(), list(range(9)))

    def test_time_limit(self):
        b = HexBoard(3)
        b.set_tag(4, BLACK)
        # deadline already passed
        d = RolloutBot(rollouts=10, seed=1, time_limit=-1).choose_move(b)
        self.assertEqual(d, Decision(PLACE, 0, 0.0, {}))

    def test_full_board(self):
        b = board_from_rows(['xo',
                             'ox'])
        with self.assertRaises(ValueError):
            RolloutBot(rollouts=1).choose_move(b)

    def test_bad_args(self):
        with self.assertRaises(ValueError):
            RolloutBot(rollouts=0)
        with self.assertRaises(ValueError):
            RolloutBot(workers=0)

    @unittest.skip('slow')
    def test_beats_random(self):
        rng = np.random.default_rng(0)
        bot = RolloutBot(rollouts=200, seed=0)
        wins = 0
        for _ in range(20):
            b = HexBoard(3)
            to_move = BLACK
            while not is_connected(b, BLACK) and not is_connected(b, WHITE):
                if to_move == BLACK:
                    b.set_tag(int(rng.choice(b.empty_cells())), BLACK)
                else:
                    b.set_tag(bot.choose_move(b).point, WHITE)
                to_move = WHITE if to_move == BLACK else BLACK
            wins += is_connected(b, WHITE)
        self.assertGreaterEqual(wins, 12)


if __name__ == '__main__':
    unittest.main()
