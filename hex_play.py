"""
terminal hex against the rollout bot, or between two humans

x (player 1) joins top and bottom, o (player 2) joins left and right.
cells are entered as b2 (column letter, row number) or as two 0-based numbers 'row col'.
"""
import argparse
import logging

from connect import is_connected
from graph import GraphError, OutOfRange
from hex_board import HexBoard, PTS, EMPTY, BLACK, WHITE, opponent, coord_to_point, point_to_alphanum
from rollout_bot import RolloutBot, SWAP, N_ROLLOUTS

logger = logging.getLogger(__name__)

MAX_BOT_SIZE = 7


def parse_move(text, L):
  parts = text.split()
  if len(parts) == 2 and all(p.isdigit() for p in parts):
    r, c = int(parts[0]), int(parts[1])
  elif len(parts) == 1 and len(parts[0]) > 1 and parts[0][0].isalpha() and parts[0][1:].isdigit():
    an = parts[0].lower()
    r, c = int(an[1:]) - 1, ord(an[0]) - ord('a')
  else:
    raise ValueError('not a cell, try b2 or "1 1"')
  if not (0 <= r < L and 0 <= c < L):
    raise OutOfRange('coordinate off board')
  return coord_to_point(r, c, L)


class HexGame:
  def __init__(self, size, first=BLACK, swap_rule=True, bot=None):
    self.board = HexBoard(size)
    self.first, self.swap_rule, self.bot = first, swap_rule, bot
    self.to_move = first
    self.move_number = 1
    self.moves = {BLACK: [], WHITE: []}
    self.swapped = False
    self.winner = EMPTY

  def over(self):
    return self.winner != EMPTY

  def is_bot(self, tag):
    return self.bot is not None and self.bot.player == tag

  def play(self, tag, where):
    if self.over() or self.board.get_tag(where) != EMPTY:
      return False
    r, c = self.board.point_to_coord(where)
    self.board.apply_move(r, c, tag)
    self.moves[tag].append((r, c))
    if is_connected(self.board, tag):
      self.winner = tag
    self.move_number += 1
    self.to_move = opponent(tag)
    return True

  def can_swap(self):
    return self.swap_rule and not self.swapped and self.move_number == 2 and not self.over()

  def swap(self, tag):
    # tag takes over the opponent's first stone
    opp = opponent(tag)
    if not self.can_swap() or len(self.moves[opp]) != 1:
      return False
    r, c = self.moves[opp].pop()
    self.board.apply_move(r, c, tag)
    self.moves[tag].append((r, c))
    self.swapped = True
    self.move_number += 1
    self.to_move = opp
    return True

  def bot_turn(self):
    tag = self.bot.player
    first = None
    if self.can_swap() and len(self.moves[opponent(tag)]) == 1:
      first = self.board.coord_to_point(*self.moves[opponent(tag)][0])
    d = self.bot.choose_move(self.board, self.swap_rule and not self.swapped, self.move_number, first)
    if d.kind == SWAP:
      self.swap(tag)
    else:
      self.play(tag, d.point)
    return d


def printmenu():
  print('  h                              help menu')
  print('  s                         show the board')
  print('  b2                      play at column b, row 2')
  print('  1 1                 play at row 1, col 1 (0-based)')
  print('  sw          swap: take the first stone (move 2 only)')
  print('  [return]                            quit')


def interact(game):
  L = game.board.L
  game.board.showboard()
  while not game.over():
    tag = game.to_move
    ch = PTS[tag]
    if game.is_bot(tag):
      print('\n  %s (bot) is choosing its move ...' % ch)
      d = game.bot_turn()
      r, c = game.board.point_to_coord(d.point)
      if d.kind == SWAP:
        print('\n  %s uses the swap rule and takes %s\n' % (ch, point_to_alphanum(d.point, L)))
      else:
        print('\n  %s plays %s (row %d, col %d)\n' % (ch, point_to_alphanum(d.point, L), r, c))
      game.board.showboard()
      continue

    if game.can_swap():
      print('  %s may swap (sw)' % ch)
    cmd = input('%s to move > ' % ch).strip()
    if not cmd:
      print('\n ... adios :)\n')
      return EMPTY
    if cmd == 'h':
      printmenu()
    elif cmd == 's':
      game.board.showboard()
    elif cmd == 'sw':
      if game.swap(tag):
        game.board.showboard()
      else:
        print('  swap not available')
    else:
      try:
        where = parse_move(cmd, L)
      except (GraphError, ValueError) as e:
        print(' ', e)
        continue
      if not game.play(tag, where):
        print('\n  sorry, position occupied')
        continue
      game.board.showboard()

  if game.is_bot(game.winner):
    print('\n  %s (bot) wins. Maybe next time ...\n' % PTS[game.winner])
  else:
    print('\n  %s wins. Congratulations!\n' % PTS[game.winner])
  return game.winner


def ask(prompt, parse, default=None):
  # Ask until parse accepts the answer. With a default, bad answers take the default.
  while True:
    ans = input(prompt + ' ').strip()
    try:
      return parse(ans)
    except ValueError:
      if default is not None:
        print('  invalid input, using', default)
        return default
      print('  invalid input')

def parse_size(s):
  L = int(s)
  if L < 2:
    raise ValueError(s)
  return L

def parse_player(s):
  if s not in ('1', '2'):
    raise ValueError(s)
  return int(s)

def parse_yes_no(s):
  s = s.lower()
  if s in ('y', 'yes'): return True
  if s in ('n', 'no'): return False
  raise ValueError(s)


def build_parser():
  ap = argparse.ArgumentParser(description='Hex against a Monte Carlo rollout bot')
  ap.add_argument('--size', type=parse_size, help='board border length (asked if missing)')
  ap.add_argument('--first', type=int, choices=(1, 2), help='player who moves first (asked if missing)')
  ap.add_argument('--swap', action=argparse.BooleanOptionalAction, help='enable the swap rule (asked if missing)')
  ap.add_argument('--human', action='store_true', help='two human players, no bot')
  ap.add_argument('--rollouts', type=int, default=N_ROLLOUTS, help='rollouts per candidate move (default: %d)' % N_ROLLOUTS)
  ap.add_argument('--workers', type=int, default=1, help='worker processes for the rollouts (default: 1)')
  ap.add_argument('--seed', type=int, help='base seed for the rollouts')
  ap.add_argument('--time-limit', type=float, help='seconds the bot may think per move')
  ap.add_argument('-v', '--verbose', action='count', default=0, help='-v for info, -vv for debug logging')
  return ap


def main(argv=None):
  args = build_parser().parse_args(argv)
  level = [logging.WARNING, logging.INFO, logging.DEBUG][min(args.verbose, 2)]
  logging.basicConfig(level=level, format='%(asctime)s %(name)s %(levelname)s %(message)s')

  print('\n  Hex. x joins top and bottom, o joins left and right.\n')
  size = args.size
  if size is None:
    size = ask('board size (2 or more)?', parse_size)
  first = args.first
  if first is None:
    first = ask('who moves first, 1 (x) or 2 (o)?', parse_player, default=BLACK)
  swap = args.swap
  if swap is None:
    swap = ask('enable the swap rule (y/n)?', parse_yes_no, default=True)

  bot = None
  if not args.human:
    if size > MAX_BOT_SIZE:
      print('  warning: the bot is slow on boards larger than %d' % MAX_BOT_SIZE)
    bot = RolloutBot(rollouts=args.rollouts, player=WHITE, workers=args.workers,
                     seed=args.seed, time_limit=args.time_limit)
  logger.info('size %d, first %s, swap %s, bot %s', size, PTS[first], swap, bot is not None)
  interact(HexGame(size, first=first, swap_rule=swap, bot=bot))


if __name__ == "__main__":
  main()
