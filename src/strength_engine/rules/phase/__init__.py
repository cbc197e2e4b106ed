"""Phase-coefficient stage: the week's planned load change."""
