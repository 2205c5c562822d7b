"""
win check: has a player joined their two sides of the board

a side pair is joined when the pathfinder finds a route between a cell on one side and
a cell on the other that only passes through the player's own stones.
"""
from hex_board import EMPTY, BLACK, WHITE, opponent
from pathfind import PathFinder

VERTICAL, LATERAL = 'vertical', 'lateral'


def axis_of(tag):
  # x joins north-south, o joins west-east
  return VERTICAL if tag == BLACK else LATERAL

def border_pairs(board, axis):
  if axis == VERTICAL:
    starts, ends = board.TOP_ROW, board.BTM_ROW
  elif axis == LATERAL:
    starts, ends = board.LFT_COL, board.RGT_COL
  else:
    raise ValueError("Unknown axis: %r" % (axis,))
  for s in starts:
    for e in ends:
      yield s, e

def is_connected(board, tag, axis=None):
  if axis is None:
    axis = axis_of(tag)
  banned = (EMPTY, opponent(tag))
  path = PathFinder(board)
  for s, e in border_pairs(board, axis):
    if path.seek_path(s, e, banned, exhaustive=False):
      return True
  return False

def query_win(board, tag):
  return is_connected(board, tag)

def winner(board):
  for tag in (BLACK, WHITE):
    if is_connected(board, tag):
      return tag
  return EMPTY
