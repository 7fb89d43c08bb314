#!/usr/bin/env python3
"""
CLI for generating educational stories through the story API.

Usage:
    python cli/generate_story.py "photosynthesis" "football"
    python cli/generate_story.py "fractions" "dinosaurs" --output fractions.md
    python cli/generate_story.py "the water cycle" "Bluey" --narrate --share
    python cli/generate_story.py "gravity" "space pirates" --stdout
    python cli/generate_story.py --story-id 0b5e... --narrate   # fetch a shared story
"""

import argparse
import asyncio
import base64
import logging
import os
import re
import sys
from datetime import datetime
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from cuentos.api.logging import configure_logging  # noqa: E402
from cuentos.client import StoryApiError, StoryClient, StoryPlayer, WavFileSink  # noqa: E402

DATA_URI_RE = re.compile(r"^data:image/(?P<ext>[a-z0-9.+-]+);base64,(?P<payload>.+)$", re.DOTALL)


def save_images(images: list[str], output_dir: Path, stem: str) -> list[str]:
    """Write data-URI images next to the story. Returns relative file names."""
    names = []
    for i, uri in enumerate(images, start=1):
        match = DATA_URI_RE.match(uri)
        if not match:
            continue
        ext = "jpg" if match["ext"] == "jpeg" else match["ext"]
        name = f"{stem}_{i}.{ext}"
        (output_dir / name).write_bytes(base64.b64decode(match["payload"]))
        names.append(name)
    return names


async def run(args: argparse.Namespace) -> int:
    async with StoryClient(args.api_url) as client:
        try:
            if args.story_id:
                story_id = args.story_id
                story = await client.get_story(story_id)
            else:
                if args.verbose:
                    print(f"Generating story: {args.concept} / {args.interest}")
                story, story_id = await client.generate_story(args.concept, args.interest)
        except StoryApiError as e:
            print(f"Error: {e.message}", file=sys.stderr)
            return 1

        if args.stdout:
            print(story.to_formatted_string())
            output_dir, stem = None, None
        else:
            output_dir = Path(__file__).parent.parent / "output"
            output_dir.mkdir(exist_ok=True)

            if args.output:
                stem = args.output[:-3] if args.output.endswith(".md") else args.output
            else:
                # Auto-generate filename from title and timestamp
                slug = re.sub(r"[^a-z0-9]+", "_", story.title.lower())[:30].strip("_") or "story"
                stem = f"{slug}_{datetime.now().strftime('%Y%m%d_%H%M%S')}"

            image_names = save_images(story.images, output_dir, stem)
            output_path = output_dir / f"{stem}.md"
            output_path.write_text(story.to_formatted_string(image_names))
            print(f"Story saved to: {output_path}")

        if not story_id:
            if args.narrate or args.share:
                print("Story was not saved on the server; narration and sharing are unavailable.", file=sys.stderr)
            return 0

        if args.share:
            try:
                share = await client.share(story_id)
                print(f"{share['message']}\n{share['url']}")
            except StoryApiError as e:
                print(f"Share failed: {e.message}", file=sys.stderr)

        if args.narrate:
            wav_dir = output_dir or Path.cwd()
            wav_path = wav_dir / f"{stem or story_id}.wav"
            player = StoryPlayer(
                fetch_audio=lambda: client.fetch_audio(story_id),
                sink=WavFileSink(wav_path),
                on_listen_start=lambda: client.mark_listened(story_id),
            )
            async with player:
                await player.toggle()
            if player.last_error:
                print(f"Narration failed: {player.last_error}", file=sys.stderr)
                return 1
            print(f"Narration saved to: {wav_path}")

    return 0


def main():
    parser = argparse.ArgumentParser(
        description="Generate an illustrated educational story from a concept and an interest",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python cli/generate_story.py "photosynthesis" "football"
    python cli/generate_story.py "fractions" "dinosaurs" --output fractions.md
    python cli/generate_story.py "the water cycle" "Bluey" --narrate --share
        """,
    )

    parser.add_argument("concept", nargs="?", help="The academic concept to explain")
    parser.add_argument("interest", nargs="?", help="The theme or fandom to frame the story")

    parser.add_argument(
        "--story-id",
        type=str,
        default=None,
        help="Fetch an existing shared story instead of generating one",
    )

    parser.add_argument(
        "--api-url",
        type=str,
        default=os.getenv("STORY_API_URL", "http://localhost:8000"),
        help="Base URL of the story API (default: $STORY_API_URL or http://localhost:8000)",
    )

    parser.add_argument(
        "--output", "-o",
        type=str,
        default=None,
        help="Output file name (saved to output/ directory). Auto-generated if not specified.",
    )

    parser.add_argument(
        "--stdout",
        action="store_true",
        help="Print to terminal instead of saving to file",
    )

    parser.add_argument(
        "--narrate",
        action="store_true",
        help="Save the story narration as a WAV file",
    )

    parser.add_argument(
        "--share",
        action="store_true",
        help="Print a share message and permalink",
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Print progress information",
    )

    args = parser.parse_args()

    if not args.story_id and not (args.concept and args.interest):
        parser.error("concept and interest are required unless --story-id is given")

    configure_logging(json_format=False, level=logging.INFO if args.verbose else logging.WARNING)
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
