"""Application logging and the validation log."""
