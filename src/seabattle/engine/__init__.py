"""Board, ship and player model plus the turn driver."""
