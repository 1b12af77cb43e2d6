from adonolam.views import PageInfo, base_layout, index_page


def test_index_page_has_title():
    page = index_page()
    assert "<title>Adon Olam Tune Generator</title>" in page
    assert '<meta property="og:title" content="Adon Olam Tune Generator">' in page


def test_index_page_has_upload_form():
    page = index_page()
    assert 'hx-post="/api/upload"' in page
    assert '<input type="file" name="uploadFile">' in page
    assert '<input type="number" name="trackNo">' in page


def test_layout_wraps_content():
    page = base_layout(PageInfo(title="T"), "<p>body</p>")
    assert page.startswith("<!doctype html><html><head>")
    assert page.endswith("<body><p>body</p></body></html>")


def test_layout_inserts_content_unescaped():
    page = base_layout(PageInfo(), "<div>x & y</div>")
    assert "<div>x & y</div>" in page


def test_layout_escapes_title():
    page = base_layout(PageInfo(title="<b>&"), "")
    assert "<title>&lt;b&gt;&amp;</title>" in page
    assert "<b>&" not in page


def test_layout_escapes_quotes_in_description():
    page = base_layout(PageInfo(description="say \"hi\" 'there'"), "")
    assert 'content="say &#34;hi&#34; &#39;there&#39;"' in page


def test_page_info_defaults_empty():
    info = PageInfo()
    assert (info.request_uri, info.title, info.description, info.image, info.image_alt) == (
        "",
        "",
        "",
        "",
        "",
    )
    page = base_layout(info, "")
    assert "<title></title>" in page