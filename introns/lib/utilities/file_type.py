
magic_dict = {
    b"\x1f\x8b\x08": "gzip",
    b"\x42\x5a\x68": "bzip2",
}


max_len = max(len(x) for x in magic_dict)


def filetype(filename):
    """
    Guess the compression of a file from its first bytes.

    :return: 'gzip', 'bzip2' or 'text'
    """
    with open(filename, "rb") as f:
        file_start = f.read(max_len)
    for magic, file_type in magic_dict.items():
        if file_start.startswith(magic):
            return file_type
    return "text"
