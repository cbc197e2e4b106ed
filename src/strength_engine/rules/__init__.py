"""Load-adjustment rules applied by the recommendation engine, in stage order."""
