"""JusMind: a terminal tutor for Brazilian law exam preparation."""
