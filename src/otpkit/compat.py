from random import SystemRandom

# Use secure system randomness for secret text generation.
random = SystemRandom()
