from .resolver import WorkResolver, resolve_work, title_match_score, choose_best_match
