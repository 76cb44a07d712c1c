"""reservations – appointment booking core: time rules, conflicts, availability, lifecycle."""
