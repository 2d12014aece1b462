import json

INFO = {
    "title": "Never Gonna Give You Up",
    "duration_string": "3:33",
    "thumbnails": [{"url": "https://i.ytimg.com/vi/x/default.jpg"}],
    "formats": [
        {"format_id": "137", "ext": "mp4", "width": 1920, "height": 1080, "filesize": 10485760},
        {"format_id": "138", "ext": "mp4", "width": 1920, "height": 1080, "filesize": 20971520},
        {"format_id": "251", "ext": "webm", "width": None, "height": None, "filesize": 4000000},
        {"format_id": "mp3-128", "ext": "mp3", "width": None, "height": None, "filesize_approx": 1572864},
    ],
}


def metadata_tool(tmp_path, payload):
    args_file = tmp_path / "args.json"
    return args_file, f"""
        import json, sys
        with open({str(args_file)!r}, "w") as fh:
            json.dump(sys.argv[1:], fh)
        sys.stdout.write({payload!r})
    """


def test_missing_url_is_rejected(client):
    response = client.get("/video-info")
    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "URL is required"
    assert "/video-info?url=" in body["example"]


def test_blank_url_is_rejected(client):
    assert client.get("/video-info", params={"url": "  "}).status_code == 400


def test_video_info_summary(client, fake_ytdlp, tmp_path):
    args_file, body = metadata_tool(tmp_path, json.dumps(INFO))
    fake_ytdlp(body)

    response = client.get("/video-info", params={"url": "https://youtu.be/dQw4w9WgXcQ"})
    assert response.status_code == 200
    data = response.json()
    assert data["title"] == "Never Gonna Give You Up"
    assert data["duration"] == "3:33"
    assert data["thumbnail"] == "https://i.ytimg.com/vi/x/default.jpg"
    assert data["formats"] == [
        {
            "itag": "137",
            "qualityLabel": "1080p (HD)",
            "resolution": "1920x1080",
            "aspectRatio": "16:9",
            "container": "mp4",
            "size": "10.00 MB",
        },
        {
            "itag": "mp3-128",
            "qualityLabel": "Audio (MP3)",
            "resolution": "audio",
            "aspectRatio": "N/A",
            "container": "mp3",
            "size": "~1.50 MB",
        },
    ]

    args = json.loads(args_file.read_text())
    assert args == ["-J", "--no-warnings", "--no-check-certificate", "https://youtu.be/dQw4w9WgXcQ"]


def test_tool_failure_reports_stderr(client, fake_ytdlp):
    fake_ytdlp("""
        import sys
        sys.stderr.write("ERROR: Unsupported URL: https://example.com\\n")
        sys.exit(1)
    """)

    response = client.get("/video-info", params={"url": "https://example.com"})
    assert response.status_code == 500
    body = response.json()
    assert body["error"] == "Failed to fetch video info"
    assert "yt-dlp failed with code 1" in body["details"]
    assert "Unsupported URL" in body["details"]
    assert body["solution"]


def test_empty_output_is_a_failure(client, fake_ytdlp):
    fake_ytdlp("pass\n")

    response = client.get("/video-info", params={"url": "https://example.com"})
    assert response.status_code == 500
    assert response.json()["details"] == "yt-dlp failed with code 0: No output"


def test_malformed_json(client, fake_ytdlp):
    fake_ytdlp("""
        import sys
        sys.stdout.write("{not json")
    """)

    response = client.get("/video-info", params={"url": "https://example.com"})
    assert response.status_code == 500
    assert response.json()["details"] == "Failed to parse video information"


def test_missing_executable(client, monkeypatch, tmp_path):
    import services.ytdlp

    monkeypatch.setattr(services.ytdlp, "YTDLP_PATH", str(tmp_path / "no-such-yt-dlp"))
    response = client.get("/video-info", params={"url": "https://example.com"})
    assert response.status_code == 500
    assert "Could not start" in response.json()["details"]


def test_parse_and_tool_errors_log_differently(client, fake_ytdlp, caplog):
    fake_ytdlp("""
        import sys
        sys.stdout.write("{not json")
    """)
    client.get("/video-info", params={"url": "https://example.com/a"})
    parse_logs = [r.getMessage() for r in caplog.records]
    assert any("[INFO] JSON parse error" in m for m in parse_logs)
    assert not any("[INFO] yt-dlp error" in m for m in parse_logs)

    caplog.clear()
    fake_ytdlp("""
        import sys
        sys.stderr.write("ERROR: Video unavailable\\n")
        sys.exit(1)
    """)
    client.get("/video-info", params={"url": "https://example.com/b"})
    tool_logs = [r.getMessage() for r in caplog.records]
    assert any("[INFO] yt-dlp error" in m and "Video unavailable" in m for m in tool_logs)
    assert not any("[INFO] JSON parse error" in m for m in tool_logs)
