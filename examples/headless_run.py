"""Run a batch of CHIP-8 machines headless and save their final screens."""

import argparse
import time

import jax
import jax.numpy as jnp
import numpy as np
from PIL import Image

from chipax import create_state, load_rom, run_frames, check_fault, batch_render
from chipax.logging import logger


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("rom")
    parser.add_argument("--frames", type=int, default=600)
    parser.add_argument("--machines", type=int, default=4)
    parser.add_argument("--output", default="screens.png")
    args = parser.parse_args()

    rng = jax.random.PRNGKey(0)
    states = jax.vmap(create_state)(jax.random.split(rng, args.machines))
    template = load_rom(create_state(), args.rom)
    states = states.replace(memory=jnp.broadcast_to(template.memory, states.memory.shape))

    rollout = jax.jit(jax.vmap(lambda s: run_frames(s, args.frames)))

    start = time.time()
    final_states, displays, _ = jax.block_until_ready(rollout(states))
    logger.info(f"Emulated {args.machines} x {args.frames} frames in {time.time() - start:.2f}s")

    check_fault(final_states)
    failures = int(np.sum(final_states.decode_failures))
    if failures:
        logger.warning(f"{failures} unknown opcodes were skipped")

    Image.fromarray(batch_render(final_states.display, scale=4)).save(args.output)
    logger.info(f"Saved {args.output}")
