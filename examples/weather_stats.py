"""
Per-station temperature statistics.
Input lines look like `station,temperature`; malformed lines are skipped.
"""


def map_fn(key, line):
    parts = line.split(',')
    if len(parts) != 2:
        return
    station, reading = parts[0].strip(), parts[1].strip()
    try:
        yield (station, float(reading))
    except ValueError:
        return


def reduce_fn(key, values):
    yield (key, {
        'min': min(values),
        'max': max(values),
        'mean': round(sum(values) / len(values), 2),
        'count': len(values),
    })
