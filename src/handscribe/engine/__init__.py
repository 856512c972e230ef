"""Betting-round engine shared by flop, draw and stud games."""
