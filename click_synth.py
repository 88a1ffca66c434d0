import numpy as np

SAMPLE_RATE = 44100
CLICK_DURATION_S = 0.05
DECAY_RATE = 50.0
INT16_PEAK = 32767


def generate_click_samples(
    frequency: float,
    sample_rate: int = SAMPLE_RATE,
    duration_s: float = CLICK_DURATION_S,
    decay_rate: float = DECAY_RATE,
) -> np.ndarray:
    """Generate a decaying sine click as signed 16-bit PCM.

    sample[i] = round(e^(-decay_rate * t) * sin(2*pi*frequency*t) * 32767), t = i / sample_rate
    """
    num_samples = int(round(sample_rate * duration_s))
    t = np.arange(num_samples, dtype=np.float64) / float(sample_rate)
    envelope = np.exp(-decay_rate * t)
    wave = envelope * np.sin(2.0 * np.pi * frequency * t) * INT16_PEAK
    return np.round(wave).astype(np.int16)
