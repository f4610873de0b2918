from quadmom.harness.comparison_harness import ComparisonHarness, AggregateStats, TrialRecord
