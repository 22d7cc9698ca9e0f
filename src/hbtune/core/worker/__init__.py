"""Records, log, evaluators and progress events of a Hyperband execution."""
