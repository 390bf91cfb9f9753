"""Testing helpers – fakes for clocks and metrics."""
