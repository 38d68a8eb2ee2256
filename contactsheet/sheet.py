from .prelude import *
from .sampling import sample_timestamps
from .imgproc import scale_to_fit
from .montage import compose_grid
from .video import Video


def make_contact_sheet(video, spec, workers=1, progress=False):
    """
    Build a contact sheet image for a video.

    Probes the video once, infers the cell height if needed, samples rows * cols evenly
    spaced frames, fits each into its cell and lays them out on one canvas. Any frame
    that fails to capture aborts the whole sheet.

    Args:
        video (Video): Video to summarize.
        spec (GridSpec): Grid geometry; a cell_height of 0 is inferred from the video.
        workers (int, optional): Number of frames decoded concurrently.
        progress (bool, optional): Show a progress bar while capturing.

    Returns:
        np.array: (H x W x 4) np.uint8 RGBA canvas.
    """
    metadata = video.metadata()
    spec = spec.resolve(metadata)

    times = sample_timestamps(metadata.duration, spec.num_cells())
    log.debug('Sampling {} frames: {}'.format(len(times), ', '.join(
        ffmpeg_fmt_time(t) for t in times)))

    fitted = video.frames(
        times,
        workers=workers,
        progress=progress,
        fn=lambda f: scale_to_fit(f, spec.cell_width, spec.cell_height))

    return compose_grid(fitted, spec)


def generate(config, probe=None, extractor=None, progress=True):
    """
    Run a full configuration: build the sheet and write it to `config.output`.

    Without explicit collaborators, the ffmpeg binaries must be on PATH.

    Returns:
        str: Path of the written image.
    """
    needed = ([] if extractor is not None else ['ffmpeg']) + \
        ([] if probe is not None else ['ffprobe'])
    ensure_executables(needed)

    video = Video(config.input, probe=probe, extractor=extractor)
    canvas = make_contact_sheet(
        video, config.grid_spec(), workers=config.workers, progress=progress)
    imwrite(config.output, canvas, quality=config.quality)

    log.info('Wrote contact sheet to {}'.format(config.output))
    return config.output
