# biathlon-race

Reads the event log of a biathlon competition and writes two things to
standard output. The first is a line for every event as it is processed. The
second is a final report with one line for each competitor whose race has
ended.

## Installation

```
pip install .
```

## Usage

```
biathlon-race --config config.json < events
```

If `--config` is not given, the path is taken from the `CONFIG_PATH`
environment variable:

```
CONFIG_PATH=config.json biathlon-race < events
```

If the configuration cannot be read or parsed, the command prints
`cannot load configuration: ...` to standard error and exits with status 1.

### Configuration

The configuration is a JSON object:

```json
{
    "laps": 2,
    "lapLen": 3651,
    "penaltyLen": 50,
    "firingLines": 1,
    "start": "09:30:00",
    "startDelta": "00:00:30"
}
```

- `laps` is the number of main laps.
- `lapLen` is the length of a main lap in metres.
- `penaltyLen` is the length of a penalty lap in metres.
- `firingLines` is the number of firing lines. The report's shot count is
  five times this number.
- `start` is the planned start time, written `HH:MM:SS` or `HH:MM:SS.sss`.
- `startDelta` is how long after the drawn start time a competitor may still
  start. It uses the same format, but any fraction of a second is dropped.

A missing key keeps its default: zero for the numbers, no start time, and a
zero start delta. A value of the wrong type or format raises `ConfigError`.

### Events

Each input line has the form `[HH:MM:SS] eventID competitorID [extra...]`.
The timestamp may carry a fraction of a second, as in `[09:30:00.500]`.

| ID | Meaning                          | Extra               |
|----|----------------------------------|---------------------|
| 1  | competitor registered            |                     |
| 2  | start time set by a draw         | start time          |
| 3  | competitor on the start line     |                     |
| 4  | competitor started               |                     |
| 5  | competitor on the firing range   | firing range number |
| 6  | target hit                       | target number       |
| 7  | competitor left the firing range |                     |
| 8  | competitor entered penalty laps  |                     |
| 9  | competitor left penalty laps     |                     |
| 10 | competitor ended a main lap      |                     |
| 11 | competitor can't continue        | free-text comment   |

The program also produces two events of its own. Event 32 means the
competitor is disqualified. This happens when the competitor starts before
the drawn time, starts later than the drawn time plus `startDelta`, or starts
with no time drawn. Event 33 means the competitor has finished all laps.

Each entry to the penalty laps counts one penalty lap for every target out of
five that was not hit since the previous entry. When a competitor is
disqualified, has finished, or can't continue, all later events for that
competitor are still logged but change nothing.

A line that cannot be parsed, or an event that cannot be applied, produces an
`[ERROR] ... error has occured but was ignored: ...` line and is then
skipped. Examples of events that cannot be applied are a bad drawn start
time, or leaving penalty laps that were never entered.

### Report

After the last event, the program prints one line for each competitor:

```
[status] competitorID [{lap time, lap speed}, ...] {penalty time, penalty speed} hits/shots
```

- The status is `NotStarted` for a disqualified competitor, `NotFinished`
  for one who can't continue, or the total race time for a finisher.
- Times are written `HH:MM:SS.mmm`. Speeds are in metres per second, with
  three decimals.
- The first lap's time includes the delay between the drawn start time and
  the actual start.
- A lap or penalty entry with no time is written `{,}`.

The lines come in three groups, in this order:

1. Competitors who did not start, sorted by drawn start time.
2. Competitors who did not finish, sorted by the time they were last seen.
3. Competitors who finished, sorted by total time.

Competitors who are still racing when the input ends are not reported.

## Library use

```python
import sys
from biathlon_race.config import load_config
from biathlon_race.cli import run

config = load_config("config.json")
with open("events") as events:
    run(events, sys.stdout, config)
```

Each stage is also available on its own:

- `biathlon_race.parser.parse_event_line` parses a single line and raises
  `ParseError` if it cannot.
- `biathlon_race.parser.parse_events` yields the events from an iterable of
  lines.
- `biathlon_race.processor.process_events` returns a dictionary that maps
  each competitor ID to its `CompetitorState`.
- `biathlon_race.report.generate_report` writes the final report.
- `biathlon_race.report.format_duration` and
  `biathlon_race.report.calculate_average_speed` are the formatting helpers.

## Running the tests

```
pip install ".[test]"
pytest
```