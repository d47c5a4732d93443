"""
Parlor CLI - Command-line interface for the engine.

Usage:
    parlor serve [--host H] [--port P]       Run the HTTP API with uvicorn
    parlor shuffle [--difficulty D] [--seed N]  Print a solvable puzzle shuffle
    parlor score GUESS TARGET                Print word game feedback
"""

import argparse
import sys


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Parlor - Turn-based game engine",
        prog="parlor",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=8000, help="Bind port")
    serve_parser.add_argument("--reload", action="store_true", help="Reload on code changes")

    # Shuffle command
    shuffle_parser = subparsers.add_parser("shuffle", help="Print a solvable puzzle shuffle")
    shuffle_parser.add_argument("--difficulty", default="easy", choices=["easy", "medium", "hard"])
    shuffle_parser.add_argument("--seed", type=int, help="Random seed")

    # Score command
    score_parser = subparsers.add_parser("score", help="Print word game feedback for a guess")
    score_parser.add_argument("guess", help="Guessed word")
    score_parser.add_argument("target", help="Target word")

    args = parser.parse_args(argv)

    if args.command == "serve":
        return cmd_serve(args)
    elif args.command == "shuffle":
        return cmd_shuffle(args)
    elif args.command == "score":
        return cmd_score(args)
    else:
        parser.print_help()
        return 1


def cmd_serve(args):
    """Run the API server."""
    import uvicorn
    from .config import load_settings, configure_logging

    settings = load_settings()
    configure_logging(settings)
    uvicorn.run(
        "parlor.api.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )
    return 0


def cmd_shuffle(args):
    """Print a shuffled, solvable puzzle as a grid."""
    from .engine_core.random_source import RandomSource
    from .games.sliding_puzzle import grid_size_for, shuffled_tiles, count_inversions

    grid_size = grid_size_for(args.difficulty)
    tiles = shuffled_tiles(grid_size, RandomSource(args.seed))
    width = len(str(grid_size * grid_size - 1))

    for row in range(grid_size):
        cells = tiles[row * grid_size:(row + 1) * grid_size]
        print(" ".join("." * width if t == 0 else str(t).rjust(width) for t in cells))
    print(f"\n{grid_size}x{grid_size}, {count_inversions(tiles)} inversions")
    return 0


def cmd_score(args):
    """Print per-letter feedback for a guess."""
    from .games.word_guess import score_guess, normalize

    guess = normalize(args.guess)
    target = normalize(args.target)
    if len(guess) != len(target):
        print(f"Error: guess and target must have the same length ({len(guess)} != {len(target)})")
        return 1

    for letter, mark in zip(guess, score_guess(guess, target)):
        print(f"{letter}  {mark}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
