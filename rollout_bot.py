"""
monte carlo rollout bot

for every empty cell the bot plays the cell on a private copy of the board, fills the
rest of the board at random with alternating stones and asks the win check who made it.
the cell with the best win ratio is played. on the bot's first reply with the swap rule
on, taking over the opponent's first stone is evaluated the same way.
"""
import logging
import time
from collections import namedtuple
from multiprocessing import Pool

import numpy as np

from connect import is_connected
from hex_board import WHITE, opponent, point_to_alphanum

logger = logging.getLogger(__name__)

N_ROLLOUTS = 750
PLACE, SWAP = 'place', 'swap'

# kind is PLACE or SWAP, point the cell played (for SWAP the opponent's stone taken over),
# ratios maps every evaluated candidate (a cell, or SWAP) to its win ratio
Decision = namedtuple('Decision', 'kind point ratio ratios')


def play_out(board, point, player, others, rng, take_over_chance=0.0):
  # One rollout: player takes point, then the cells in others are handed out at random,
  # opponent first. With take_over_chance the opponent may swap point on the next move.
  b = board.copy()
  b.tags[point] = player
  to_move = opponent(player)
  if take_over_chance and rng.random() < take_over_chance:
    b.tags[point] = to_move
    to_move = player
  for c in rng.permutation(others):
    b.tags[c] = to_move
    to_move = opponent(to_move)
  return is_connected(b, player)

def rollout_batch(board, point, player, others, rollouts, seed, kind=0, take_over_chance=0.0, deadline=None):
  # Runs in a worker. Each rollout has its own generator so the result does not depend
  # on which worker ran it or in what order.
  wins = played = 0
  for i in range(rollouts):
    if deadline is not None and time.time() > deadline:
      break
    rng = np.random.default_rng([seed, kind, point, i])
    if play_out(board, point, player, others, rng, take_over_chance):
      wins += 1
    played += 1
  return wins, played


class RolloutBot:
  def __init__(self, rollouts=N_ROLLOUTS, player=WHITE, workers=1, seed=None, time_limit=None):
    if rollouts < 1:
      raise ValueError("Need at least one rollout per candidate.")
    if workers < 1:
      raise ValueError("Need at least one worker.")
    self.rollouts = rollouts
    self.player = player
    self.workers = workers
    self.seed = seed
    self.time_limit = time_limit

  def base_seed(self):
    if self.seed is not None:
      return self.seed
    seed = np.random.SeedSequence().entropy
    logger.debug("rollout seed %d", seed)
    return seed

  def first_move_of(self, board):
    # The opponent's only stone, None if it has not exactly one
    stones = board.stones(opponent(self.player))
    return stones[0] if len(stones) == 1 else None

  def candidates(self, board, swap_rule, move_number, first_move):
    # (key, point, others, kind, take_over_chance) in enumeration order: cells by index, then swap
    empty = board.empty_cells()
    take_over = 0.5 if swap_rule and move_number == 1 else 0.0
    out = []
    for p in empty:
      others = [c for c in empty if c != p]
      out.append((p, p, others, 0, take_over))
    if swap_rule and move_number == 2:
      if first_move is None:
        first_move = self.first_move_of(board)
      if first_move is not None:
        out.append((SWAP, first_move, empty, 1, 0.0))
    return out

  def win_ratio(self, board, point, swap_rule=False, move_number=None):
    empty = board.empty_cells()
    if move_number is None:
      move_number = board.n - len(empty) + 1
    others = [c for c in empty if c != point]
    take_over = 0.5 if swap_rule and move_number == 1 else 0.0
    wins, played = rollout_batch(board, point, self.player, others, self.rollouts,
                                 self.base_seed(), 0, take_over)
    return wins / played

  def choose_move(self, board, swap_rule=False, move_number=None, first_move=None):
    if move_number is None:
      move_number = board.n - len(board.empty_cells()) + 1
    cands = self.candidates(board, swap_rule, move_number, first_move)
    if not cands:
      raise ValueError("No move available, the board is full.")

    seed = self.base_seed()
    deadline = time.time() + self.time_limit if self.time_limit else None
    args = [(board, point, self.player, others, self.rollouts, seed, kind, take_over, deadline)
            for _, point, others, kind, take_over in cands]
    st = time.time()
    if self.workers > 1:
      with Pool(processes=self.workers) as pool:
        pending = [pool.apply_async(rollout_batch, args=a) for a in args]
        results = [r.get() for r in pending]
    else:
      results = [rollout_batch(*a) for a in args]

    ratios = {}
    best = None
    for (key, point, _, _, _), (wins, played) in zip(cands, results):
      if played < self.rollouts:
        logger.warning("time limit hit, %s ran %d of %d rollouts", key, played, self.rollouts)
      if played == 0:
        continue
      ratio = wins / played
      ratios[key] = ratio
      logger.debug("candidate %s: %d/%d", key if key == SWAP else point_to_alphanum(point, board.L),
                   wins, played)
      if best is None or ratio > best[2]:
        best = (key, point, ratio)

    if best is None:
      point = cands[0][1]
      decision = Decision(SWAP if cands[0][0] == SWAP else PLACE, point, 0.0, ratios)
    else:
      key, point, ratio = best
      decision = Decision(SWAP if key == SWAP else PLACE, point, ratio, ratios)
    logger.info("bot %s %s (ratio %.3f, %d candidates, %.2fs)", decision.kind,
                point_to_alphanum(decision.point, board.L), decision.ratio, len(cands), time.time() - st)
    return decision
