#!/usr/bin/env python3
"""
Analyze spectate debug logs to spot camera-direction problems.

Usage:
    python tools/analyze_spectate_log.py <log_file_path>
"""

import re
import sys
from collections import Counter
from pathlib import Path


def parse_log_file(log_path):
    """Parse the debug log and extract key metrics."""

    events = []
    event_types = Counter()

    selections = []
    directives = []
    idle_steps = []

    tier_counts = Counter()
    target_counts = Counter()

    with open(log_path, 'r', encoding='utf-8') as f:
        for line in f:
            # Extract playback time, event type, and details
            match = re.search(r'Time: ([\d.]+)s.*Event: (\w+).*Details: (.+)$', line)
            if not match:
                continue

            time, event_type, details = match.groups()
            time = float(time)

            event_types[event_type] += 1
            events.append((time, event_type, details))

            if event_type == 'selection':
                selections.append((time, details))
                tier_match = re.search(r'Tier (\w+)', details)
                if tier_match:
                    tier_counts[tier_match.group(1)] += 1

            elif event_type == 'directive':
                hold_match = re.search(r'Hold ([\d.]+)s', details)
                hold = float(hold_match.group(1)) if hold_match else 0.0
                directives.append((time, hold, details))
                target_match = re.search(r'Target (.+?) \|', details)
                if target_match:
                    target_counts[target_match.group(1)] += 1

            elif event_type == 'no_selection':
                idle_steps.append((time, details))

    return {
        'events': events,
        'event_types': event_types,
        'selections': selections,
        'directives': directives,
        'idle_steps': idle_steps,
        'tier_counts': tier_counts,
        'target_counts': target_counts,
    }


def analyze_tiers(tier_counts):
    """Report which tiers drove the camera."""
    print("\n=== TIER ANALYSIS ===")
    total = sum(tier_counts.values())
    print(f"Total selections: {total}")

    if not total:
        print("  ⚠️  No selections - timeline may be empty")
        return

    for tier, count in tier_counts.most_common():
        print(f"  {tier}: {count} ({count/total*100:.1f}%)")

    fallback = tier_counts.get('ALIVE', 0) + tier_counts.get('PING', 0)
    if fallback > total * 0.7:
        print("  ⚠️  Mostly fallback selections - windows may be too short for this match")


def analyze_holds(directives):
    """Analyze how long the camera stays on a target."""
    print("\n=== HOLD ANALYSIS ===")
    print(f"Total directives: {len(directives)}")

    if not directives:
        return

    holds = [hold for _, hold, _ in directives]
    print(f"  Average hold: {sum(holds)/len(holds):.1f}s")
    print(f"  Longest hold: {max(holds):.1f}s")

    switches_per_minute = len(directives) / max(1.0, directives[-1][0] / 60.0)
    print(f"  Focus changes per minute: {switches_per_minute:.1f}")
    if switches_per_minute > 20:
        print("  ⚠️  Camera switching very often - consider longer grace periods")


def analyze_targets(target_counts):
    """Analyze how evenly the camera covers participants."""
    print("\n=== TARGET ANALYSIS ===")

    if not target_counts:
        print("  No targets recorded")
        return

    most = target_counts.most_common(1)[0]
    least = min(target_counts.items(), key=lambda x: x[1])
    print(f"  Participants watched: {len(target_counts)}")
    print(f"  Most watched: {most[0]} ({most[1]} directives)")
    print(f"  Least watched: {least[0]} ({least[1]} directives)")

    if most[1] > least[1] * 10:
        print("  ⚠️  Huge disparity in coverage - some participants barely shown")


def main():
    if len(sys.argv) < 2:
        print("Usage: python tools/analyze_spectate_log.py <log_file_path>")
        print("\nExample:")
        print("  python tools/analyze_spectate_log.py debug_logs/spectate_debug_20251117_222236.txt")
        sys.exit(1)

    log_path = Path(sys.argv[1])

    if not log_path.exists():
        print(f"Error: Log file not found: {log_path}")
        sys.exit(1)

    print(f"Analyzing: {log_path.name}")
    print("=" * 60)

    data = parse_log_file(log_path)

    print("\n=== EVENT SUMMARY ===")
    for event_type, count in data['event_types'].most_common(15):
        print(f"  {event_type}: {count}")

    if data['idle_steps']:
        print(f"\n  Cursor skipped ahead {len(data['idle_steps'])} times with nothing to show")

    analyze_tiers(data['tier_counts'])
    analyze_holds(data['directives'])
    analyze_targets(data['target_counts'])

    print("\n" + "=" * 60)
    print("Analysis complete!")


if __name__ == '__main__':
    main()
