"""HTTP boundary helpers shared by the rental and payment apps."""
