#!/usr/bin/env python3
"""
Evaluate CLI - score a German B2 answer

Scores an answer with the rule-based evaluator (or a remote evaluator when
configured), prints the scores and writes a JSON result and a markdown report.
Optionally folds the result into a learner's progress ledger.

Usage:
    python evaluate.py --text "Ich denke, dass ..."
    python evaluate.py --file answer.txt --mode essay
    python evaluate.py --file answer.txt --endpoint https://example.org/evaluate
    python evaluate.py --file answer.txt --ledger-dir ./progress --task writing

Output:
    outputs/evaluations/{name}_evaluation.json
    outputs/reports/{name}_report.md
"""

import argparse
import json
import sys
from pathlib import Path

from b2coach.evaluators import get_evaluator, list_evaluators
from b2coach.evaluators.german import EvaluationOptions, RemoteConfig, ResponseCache
from b2coach.progress import ProgressTracker, JsonFileStore


def build_parser():
    parser = argparse.ArgumentParser(
        description='Evaluate a German answer against B2 criteria',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment:
    B2COACH_AI_ENDPOINT   remote evaluation endpoint (http provider)
    B2COACH_AI_PROVIDER   http | anthropic
    B2COACH_AI_TIMEOUT    request timeout in seconds
    ANTHROPIC_API_KEY     key for the anthropic provider

Examples:
    # Rule-based evaluation
    python evaluate.py --text "Ich bin müde."

    # Essay mode, pressure mode off
    python evaluate.py --file essay.txt --mode essay --no-pressure

    # Save progress for this learner
    python evaluate.py --file answer.txt --ledger-dir ./progress --task "Konjunktiv II drill"
        """
    )

    source = parser.add_mutually_exclusive_group()
    source.add_argument('--text', help='Answer text')
    source.add_argument('--file', help='Path to a text file with the answer (default: stdin)')

    parser.add_argument(
        '--evaluator',
        default='german',
        choices=list_evaluators(),
        help=f'Evaluator to use: {", ".join(list_evaluators())}'
    )
    parser.add_argument(
        '--mode',
        default='discussion',
        choices=['discussion', 'essay'],
        help='Answer type (default: discussion)'
    )
    parser.add_argument(
        '--no-pressure',
        action='store_true',
        help='Disable pressure mode'
    )
    parser.add_argument('--endpoint', help='Remote evaluation endpoint (overrides env)')
    parser.add_argument('--provider', help='Remote provider: http or anthropic (overrides env)')
    parser.add_argument('--api-key', help='Anthropic API key (optional, can also use ANTHROPIC_API_KEY)')
    parser.add_argument(
        '--rule-based',
        action='store_true',
        help='Skip remote evaluation even if configured'
    )
    parser.add_argument('--name', default='answer', help='Name used for output files')
    parser.add_argument(
        '--output',
        default='./outputs',
        help='Output directory base (default: ./outputs)'
    )
    parser.add_argument('--ledger-dir', help='Directory of the progress ledger to update')
    parser.add_argument('--task', help='Task name to mark as completed in the ledger')
    return parser


def read_answer(args) -> str:
    if args.text is not None:
        return args.text
    if args.file:
        path = Path(args.file)
        if not path.exists():
            print(f"ERROR: Answer file not found: {path}")
            sys.exit(1)
        return path.read_text(encoding='utf-8')
    return sys.stdin.read()


def main(argv=None):
    args = build_parser().parse_args(argv)

    text = read_answer(args)

    try:
        options = EvaluationOptions(mode=args.mode, pressure_mode=not args.no_pressure)
        remote = None
        if not args.rule_based:
            remote = RemoteConfig.from_env(
                endpoint=args.endpoint, provider=args.provider, api_key=args.api_key
            )
    except ValueError as e:
        print(f"ERROR: {e}")
        sys.exit(2)

    print(f"\n{'='*60}")
    print(f"EVALUATING with {args.evaluator.upper()}")
    if remote is not None and remote.enabled:
        print(f"  Using remote evaluation ({remote.provider})")
    else:
        print("  Using rule-based evaluation")
    print(f"{'='*60}")
    print(f"Words: {len(text.split())}")

    EvaluatorClass = get_evaluator(args.evaluator)
    evaluator = EvaluatorClass(remote=remote, cache=ResponseCache())
    result = evaluator.evaluate(text, options)

    print(f"\n✓ Evaluation complete ({result.provenance})")
    print(f"  Grammar:    {result.grammar_score}")
    print(f"  Complexity: {result.complexity_score}")
    print(f"  Vocabulary: {result.vocabulary_score}")
    print(f"  Argument:   {result.argument_score}")
    print(f"  Fluency:    {result.fluency_potential}")
    print(f"  Overall:    {result.overall_score}/100")
    print(f"  Next: {result.next_challenge}")

    output_base = Path(args.output)
    eval_dir = output_base / "evaluations"
    report_dir = output_base / "reports"
    eval_dir.mkdir(parents=True, exist_ok=True)
    report_dir.mkdir(parents=True, exist_ok=True)

    safe_name = args.name.replace(' ', '_')

    eval_path = eval_dir / f"{safe_name}_evaluation.json"
    eval_data = {
        'name': args.name,
        'evaluator': args.evaluator,
        'options': {'mode': options.mode, 'pressureMode': options.pressure_mode},
        'result': result.to_dict(),
    }
    with open(eval_path, 'w', encoding='utf-8') as f:
        json.dump(eval_data, f, indent=2, ensure_ascii=False)

    report_path = report_dir / f"{safe_name}_report.md"
    with open(report_path, 'w', encoding='utf-8') as f:
        f.write(evaluator.generate_report(result, args.name))

    if args.ledger_dir:
        tracker = ProgressTracker(JsonFileStore(args.ledger_dir))
        tracker.record_exam(result, entry_type=args.mode)
        ledger = tracker.record_task_completion(args.task, True) if args.task else tracker.load()
        print(f"\n✓ Progress updated: milestone {ledger.milestone_progress}%, streak {ledger.streak}")
        for weakness, count in tracker.top_weaknesses():
            print(f"  {count}× {weakness}")

    print(f"\n{'='*60}")
    print("EVALUATION COMPLETE")
    print(f"{'='*60}")
    print(f"Evaluation: {eval_path}")
    print(f"Report: {report_path}")


if __name__ == "__main__":
    main()
