"""Search space, samplers, survivor selection and the Hyperband scheduler."""
