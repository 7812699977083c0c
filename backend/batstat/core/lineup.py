def next_batter_index(current_index: int, lineup_size: int) -> int:
    if lineup_size <= 0:
        raise ValueError("lineup is empty")
    return (current_index + 1) % lineup_size


def previous_batter_index(current_index: int, lineup_size: int) -> int:
    if lineup_size <= 0:
        raise ValueError("lineup is empty")
    return lineup_size - 1 if current_index <= 0 else current_index - 1
