"""Fantasy Premier League squad selection by totally unimodular linear programming."""
