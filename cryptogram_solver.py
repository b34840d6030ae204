#!/usr/bin/env python3
"""
cryptogram_solver.py
Solves monoalphabetic substitution cryptograms against a word list. Each
ciphertext word is matched to dictionary words with the same letter pattern,
then a breadth-first search builds partial keys (cipher letter -> plain letter)
one word at a time, dropping any key that leaves some ciphertext word without a
viable dictionary candidate. The first surviving key decrypts the text.

Usage:
    python cryptogram_solver.py --cipher "GDS ZXGW" --dictionary english.txt
    echo "GDS ZXGW" | python cryptogram_solver.py
"""

import argparse
import string
import sys
import time
from collections import deque

# ------------------ Configuration ------------------
DICTIONARY_PATH = "english.txt"   # one word per line, any case

# Removed before splitting the cryptogram into words; kept as-is in the answer.
STRIPPED_PUNCTUATION = ".,:;\"!'"

# Stands in for a cipher letter the key does not map yet. Never a real letter.
PLACEHOLDER = "."

# Search limits. None means unlimited.
MAX_SEARCH_NODES = None    # frontier keys expanded
SEARCH_TIMEOUT = None      # seconds of wall time

LETTERS = frozenset(string.ascii_uppercase)


class SearchBudgetExceeded(RuntimeError):
    """Raised when the key search runs past its node or time budget."""

    def __init__(self, reason, nodes, elapsed):
        super().__init__(f"{reason} after {nodes} nodes ({elapsed:.2f}s)")
        self.reason = reason
        self.nodes = nodes
        self.elapsed = elapsed


class UnmappedLetterError(KeyError):
    """A ciphertext letter has no image under the solution key."""

    def __init__(self, letter):
        super().__init__(letter)
        self.letter = letter

    def __str__(self):
        return f"cipher letter {self.letter!r} is not mapped by the key"


# ------------------ Tokenizing ------------------
def normalize_ciphertext(s):
    return s.upper()


def tokenize_cryptogram(text):
    """
    Split a cryptogram into its distinct words, in first-occurrence order.
    The characters in STRIPPED_PUNCTUATION are deleted (so DON'T -> DONT); any
    other non-letter separates words.
    """
    normalized = normalize_ciphertext(text)
    stripped = "".join(ch for ch in normalized if ch not in STRIPPED_PUNCTUATION)
    spaced = "".join(ch if ch in LETTERS else " " for ch in stripped)
    return list(dict.fromkeys(spaced.split()))


# ------------------ Patterns & candidates ------------------
def word_pattern(word):
    """
    Letter-equality pattern of a word: each new letter gets the next symbol
    starting at A, repeated letters reuse their symbol.
        "TEST" -> "ABCA", "NOON" -> "ABBA"
    Non-letters are copied through.
    """
    found = {}
    pattern = []
    for ch in word.upper():
        if ch not in LETTERS:
            pattern.append(ch)
            continue
        if ch not in found:
            found[ch] = string.ascii_uppercase[len(found)]
        pattern.append(found[ch])
    return "".join(pattern)


def find_candidates(cipher_words, dictionary):
    """
    Map each distinct cipher word to the dictionary words sharing its length
    and pattern. Dictionary order is kept. A word with no match maps to [].
    """
    dictionary = [w.upper() for w in dictionary]
    candidates = {}
    for cipher_word in cipher_words:
        cipher_word = cipher_word.upper()
        if cipher_word in candidates:
            continue
        pattern = word_pattern(cipher_word)
        candidates[cipher_word] = [
            w for w in dictionary
            if len(w) == len(cipher_word) and word_pattern(w) == pattern
        ]
    return candidates


# ------------------ Key algebra ------------------
def render_partial(word, key):
    """
    Decrypt as much of `word` as `key` allows; unknown letters become PLACEHOLDER.
        render_partial("DVMC", {"D": "T", "C": "A"}) -> "T..A"
    """
    return "".join(key.get(ch, PLACEHOLDER) for ch in word)


def matches_placeholder(candidate, partial):
    """True if `candidate` agrees with every known position of `partial`."""
    if len(candidate) != len(partial):
        raise ValueError(f"length mismatch: {candidate!r} vs {partial!r}")
    for plain_ch, known in zip(candidate, partial):
        if known != PLACEHOLDER and plain_ch != known:
            return False
    return True


def unify(cipher_word, candidate, prior_key):
    """
    Extend a copy of `prior_key` so that `cipher_word` decrypts to `candidate`.
    Returns None when that would bind a cipher letter to two plain letters, or
    two cipher letters to the same plain letter. `prior_key` is not modified.
    """
    if len(cipher_word) != len(candidate):
        raise ValueError(f"length mismatch: {cipher_word!r} vs {candidate!r}")
    key = dict(prior_key)
    images = {plain: cipher for cipher, plain in key.items()}
    for cipher_ch, plain_ch in zip(cipher_word, candidate):
        bound = key.get(cipher_ch)
        if bound is not None and bound != plain_ch:
            return None
        owner = images.get(plain_ch)
        if owner is not None and owner != cipher_ch:
            return None
        key[cipher_ch] = plain_ch
        images[plain_ch] = cipher_ch
    return key


# ------------------ Search ------------------
def order_by_ambiguity(candidates):
    # fewest candidates first; ties keep first-occurrence order
    return sorted(candidates.items(), key=lambda item: len(item[1]))


def dedupe_keys(keys):
    seen = set()
    unique = []
    for key in keys:
        signature = frozenset(key.items())
        if signature in seen:
            continue
        seen.add(signature)
        unique.append(key)
    return unique


def key_is_consistent(key, candidates):
    """Forward check: every cipher word still has a candidate fitting `key`."""
    for word, word_matches in candidates.items():
        partial = render_partial(word, key)
        if not any(matches_placeholder(m, partial) for m in word_matches):
            return False
    return True


def search_keys(candidates, max_nodes=MAX_SEARCH_NODES, timeout=SEARCH_TIMEOUT, verbose=False):
    """
    Breadth-first search for keys consistent with every cipher word.

    candidates: dict cipher word -> list of dictionary words (from find_candidates)
    max_nodes:  cap on frontier keys expanded, None for no cap
    timeout:    cap on seconds spent, None for no cap

    Words are taken fewest-candidates-first. For each word, every key of the
    (deduplicated) frontier is extended with every candidate that fits it, and
    an extended key survives only if all cipher words, processed or not, keep
    at least one fitting candidate.

    Returns the final frontier: every surviving key, possibly none. Callers
    take the first one; when the cryptogram is ambiguous the others are
    equally valid.

    Raises SearchBudgetExceeded when max_nodes or timeout is hit.
    """
    start = time.monotonic()
    nodes = 0
    frontier = [{}]
    for word, word_matches in order_by_ambiguity(candidates):
        worklist = deque(dedupe_keys(frontier))
        frontier = []
        while worklist:
            prev_key = worklist.popleft()
            nodes += 1
            if max_nodes is not None and nodes > max_nodes:
                raise SearchBudgetExceeded("node budget exhausted", nodes - 1, time.monotonic() - start)
            if timeout is not None and time.monotonic() - start > timeout:
                raise SearchBudgetExceeded("timed out", nodes, time.monotonic() - start)

            partial = render_partial(word, prev_key)
            for candidate in word_matches:
                if not matches_placeholder(candidate, partial):
                    continue
                key = unify(word, candidate, prev_key)
                if key is None:
                    continue
                if key_is_consistent(key, candidates):
                    frontier.append(key)
        if verbose:
            print(f"[search] {word}: {len(word_matches)} candidates -> {len(frontier)} keys")
        if not frontier:
            break
    if verbose:
        print(f"[search] Expanded {nodes} nodes in {time.monotonic() - start:.2f}s")
    return frontier


# ------------------ Decryption ------------------
def decrypt_with_key(ciphertext, key, strict=False):
    """
    Apply `key` to the whole cryptogram. Output is uppercase; anything that is
    not a letter stays where it was.
    A letter missing from the key raises UnmappedLetterError when `strict`,
    otherwise it is left as the cipher letter and a warning is printed.
    """
    out = []
    unmapped = []
    for ch in normalize_ciphertext(ciphertext):
        if ch not in LETTERS:
            out.append(ch)
            continue
        plain = key.get(ch)
        if plain is None:
            if strict:
                raise UnmappedLetterError(ch)
            if ch not in unmapped:
                unmapped.append(ch)
            out.append(ch)
            continue
        out.append(plain)
    if unmapped:
        print(f"WARNING: letters not covered by the key left as-is: {''.join(unmapped)}", file=sys.stderr)
    return "".join(out)


# ------------------ Dictionary ------------------
def prepare_dictionary(lines):
    """
    Uppercase and clean raw dictionary lines the way cryptogram words are
    cleaned: STRIPPED_PUNCTUATION is deleted (DON'T -> DONT). Blank lines and
    entries with anything else but A-Z are dropped; duplicates keep their first
    position.
    """
    words = []
    for line in lines:
        w = "".join(ch for ch in line.strip().upper() if ch not in STRIPPED_PUNCTUATION)
        if w and all(ch in LETTERS for ch in w):
            words.append(w)
    return list(dict.fromkeys(words))


def load_dictionary(path=DICTIONARY_PATH, verbose=False):
    with open(path, 'r', encoding='utf8') as f:
        words = prepare_dictionary(f)
    if verbose:
        print(f"[dict] Loaded {len(words)} words from {path}")
    return words


# ------------------ Main orchestration ------------------
def solve_cryptogram(ciphertext, dictionary, max_nodes=MAX_SEARCH_NODES,
                     timeout=SEARCH_TIMEOUT, strict=False, verbose=False):
    """
    Returns a dict:
      plaintext   decrypted text, or None when no key fits
      key         the chosen key (first of the frontier), or None
      keys_found  size of the final frontier
      candidates  cipher word -> dictionary candidates
    """
    words = tokenize_cryptogram(ciphertext)
    candidates = find_candidates(words, dictionary)
    if verbose:
        print(f"[solve] {len(words)} distinct words")
        for word, word_matches in candidates.items():
            print(f"[solve]   {word}: {len(word_matches)} candidates")

    keys = search_keys(candidates, max_nodes=max_nodes, timeout=timeout, verbose=verbose)
    result = {'plaintext': None, 'key': None, 'keys_found': len(keys), 'candidates': candidates}
    if not keys:
        return result

    key = keys[0]
    if verbose and len(keys) > 1:
        print(f"[solve] {len(keys)} keys fit; using the first")
    result['key'] = key
    result['plaintext'] = decrypt_with_key(ciphertext, key, strict=strict)
    return result


# ------------------ CLI ------------------
def read_cryptogram(args):
    if args.cipher_file:
        with open(args.cipher_file, 'r', encoding='utf8') as f:
            return f.readline().rstrip("\r\n")
    if args.cipher is not None:
        return args.cipher
    print("Enter your cryptogram:")
    return sys.stdin.readline().rstrip("\r\n")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Dictionary-driven solver for monoalphabetic substitution cryptograms")
    parser.add_argument("--cipher", type=str, default=None, help="Cryptogram (in quotes)")
    parser.add_argument("--cipher-file", type=str, default=None, help="Path to file whose first line is the cryptogram")
    parser.add_argument("--dictionary", type=str, default=DICTIONARY_PATH, help="Word list, one word per line")
    parser.add_argument("--max-nodes", type=int, default=MAX_SEARCH_NODES, help="Give up after expanding this many keys")
    parser.add_argument("--timeout", type=float, default=SEARCH_TIMEOUT, help="Give up after this many seconds")
    parser.add_argument("--strict", action="store_true", help="Fail instead of passing through letters the key does not cover")
    parser.add_argument("--show-key", action="store_true", help="Print the cipher -> plain mapping")
    parser.add_argument("--quiet", action="store_true", help="Only print the answer")
    args = parser.parse_args(argv)
    verbose = not args.quiet

    try:
        words = load_dictionary(args.dictionary, verbose=verbose)
        ciphertext = read_cryptogram(args)
    except OSError as e:
        print("ERROR:", e, file=sys.stderr)
        return 2

    if not ciphertext.strip():
        print("No ciphertext provided.", file=sys.stderr)
        return 2

    try:
        result = solve_cryptogram(ciphertext, words, max_nodes=args.max_nodes, timeout=args.timeout,
                                  strict=args.strict, verbose=verbose)
    except SearchBudgetExceeded as e:
        print("ERROR: search stopped:", e, file=sys.stderr)
        return 2
    except UnmappedLetterError as e:
        print("ERROR:", e, file=sys.stderr)
        return 2

    if result['plaintext'] is None:
        print("Could not find solution.")
        return 1

    print("Answer:")
    print(result['plaintext'])
    if args.show_key:
        print("Key (cipher -> plain):")
        for k, v in sorted(result['key'].items()):
            print(f"  {k} -> {v}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
